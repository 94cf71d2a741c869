"""sshauth -- pluggable, one-shot authentication of SSH connections.

This package picks an authentication strategy for a connection/credential
pair from an ordered registry of factories and drives it through a strict
one-shot state machine. Diagnostics about failed attempts are routed to a
caller-supplied listener rather than raised.

Typical usage::

    from sshauth.auth import new_instance
    from sshauth.listener import BufferListener

    authenticator = new_instance(transport, credentials)
    if not authenticator.authenticate(BufferListener()):
        ...

Modules:
    auth: Authenticator driver, factories, registry and resolver.
    listener: Diagnostic sinks passed to :meth:`SSHAuthenticator.authenticate`.
    models: Pydantic models for credentials and configuration.
    config: XDG-aware configuration and credential source resolution.
    plugins: Built-in paramiko strategies.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"
