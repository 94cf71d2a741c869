"""Exception hierarchy for sshauth.

All exceptions inherit from :class:`SshAuthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`sshauth.exit_codes`.
The top-level error handler in :func:`sshauth.app.main` catches
``SshAuthError`` and exits with the appropriate code.

None of these are raised by :meth:`~sshauth.auth.base.SSHAuthenticator.authenticate`:
authentication failures are reported as ``False`` plus listener messages.

Subclass hierarchy::

    SshAuthError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- ConnectionError_    (exit 6)
    +-- PluginError         (exit 10)
    +-- ConfigError         (exit 1)
"""

from sshauth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PLUGIN_ERROR,
)


class SshAuthError(Exception):
    """Base exception for all sshauth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SshAuthError):
    """Raised for invalid CLI arguments or unresolvable type names."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(SshAuthError):
    """Raised by the CLI when the resolved authenticator reports failure."""

    exit_code = EXIT_AUTH_FAILURE


class ConnectionError_(SshAuthError):
    """Raised on network-level failures (timeout, refused connection, bad host key).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class PluginError(SshAuthError):
    """Raised when an authenticator factory cannot be registered or looked up."""

    exit_code = EXIT_PLUGIN_ERROR


class ConfigError(SshAuthError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
