"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~sshauth.exceptions.SshAuthError` subclass.

Example::

    $ sshauth connect build-01 --username deploy --password-source env:PW
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the server rejected the credentials
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Authentication failed or no authenticator supports the requested pairing."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, host key mismatch)."""

EXIT_PLUGIN_ERROR = 10
"""An authenticator factory failed to load or register."""
