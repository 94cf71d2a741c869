"""Connect command -- open an SSH transport and authenticate it once.

The command negotiates a :class:`paramiko.Transport`, optionally verifies the
server's host key against a ``known_hosts`` file, resolves an authenticator
for the supplied credential and runs it. Strategy diagnostics are printed to
stderr.

Typical usage::

    sshauth connect build-01 -u deploy --password-source env:DEPLOY_PW
    sshauth connect build-01 -u deploy -k ~/.ssh/id_ed25519 --known-hosts ~/.ssh/known_hosts
"""

from __future__ import annotations

import socket
from pathlib import Path
from typing import Optional

import paramiko
import typer
from pydantic import ValidationError

from sshauth.config import load_global_config, resolve_credential
from sshauth.exceptions import (
    AuthError,
    ConfigError,
    ConnectionError_,
    InvalidUsageError,
    SshAuthError,
)
from sshauth.models import Credentials, SSHUserPrivateKey, UsernamePasswordCredentials
from sshauth.output import debug, error, get_output, success


def build_credentials(
    username: str,
    password_source: Optional[str],
    key_files: list[Path],
    passphrase_source: Optional[str],
) -> Credentials:
    """Build the credential described by the command-line options.

    Key files take precedence over a password source.

    Raises:
        InvalidUsageError: If neither a key file nor a password source is given.
        ConfigError: If a source or key file cannot be read.
    """
    if key_files:
        keys = []
        for path in key_files:
            try:
                keys.append(path.expanduser().read_text(encoding="utf-8"))
            except OSError as exc:
                raise ConfigError(f"Cannot read private key {path}: {exc}") from exc
        passphrase = (
            resolve_credential(passphrase_source, prompt="Key passphrase: ")
            if passphrase_source
            else None
        )
        return SSHUserPrivateKey(
            username=username,
            private_keys=keys,
            passphrase=passphrase,
            description=", ".join(str(p) for p in key_files),
        )
    if password_source:
        return UsernamePasswordCredentials(
            username=username,
            password=resolve_credential(password_source, prompt=f"Password for {username}: "),
            description=password_source,
        )
    raise InvalidUsageError("Provide --key-file or --password-source")


def open_transport(host: str, port: int, timeout: float) -> paramiko.Transport:
    """Connect to *host* and complete the SSH key exchange.

    Raises:
        ConnectionError_: On socket or protocol negotiation failure.
    """
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as exc:
        raise ConnectionError_(f"Cannot connect to {host}:{port}: {exc}") from exc

    transport = paramiko.Transport(sock)
    transport.banner_timeout = timeout
    try:
        transport.start_client(timeout=timeout)
    except (paramiko.SSHException, OSError) as exc:
        transport.close()
        raise ConnectionError_(f"SSH negotiation with {host}:{port} failed: {exc}") from exc
    return transport


def verify_host_key(
    transport: paramiko.Transport, host: str, port: int, known_hosts: Optional[Path]
) -> None:
    """Check the server's host key against *known_hosts*.

    No check is made when *known_hosts* is ``None``. Otherwise the server
    must present the key recorded for it; credentials are never sent to a
    host missing from the file.

    Raises:
        ConnectionError_: If the host is not recorded, or the presented key
            does not match the recorded one.
    """
    if known_hosts is None:
        debug("No known_hosts file configured, host key not verified")
        return
    host_keys = paramiko.HostKeys()
    path = known_hosts.expanduser()
    if path.is_file():
        host_keys.load(str(path))

    key = transport.get_remote_server_key()
    lookup_name = host if port == 22 else f"[{host}]:{port}"
    entry = host_keys.lookup(lookup_name)
    if entry is None or key.get_name() not in entry:
        raise ConnectionError_(
            f"Host key for {lookup_name} ({key.get_name()}) is not in {path}"
        )
    if entry[key.get_name()] != key:
        raise ConnectionError_(
            f"Host key for {lookup_name} does not match the one recorded in {path}"
        )


def connect_command(
    host: str = typer.Argument(help="Host name or address."),
    username: str = typer.Option(..., "--username", "-u", help="Remote user name."),
    port: int = typer.Option(22, "--port", "-p", help="SSH port."),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", help="Password source: env:VAR, file:/path or prompt."
    ),
    key_files: list[Path] = typer.Option(
        [], "--key-file", "-k", help="Private key file; repeat to offer several keys."
    ),
    passphrase_source: Optional[str] = typer.Option(
        None, "--passphrase-source", help="Key passphrase source: env:VAR, file:/path or prompt."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Connect timeout in seconds (default from config)."
    ),
    known_hosts: Optional[Path] = typer.Option(
        None, "--known-hosts", help="known_hosts file; hosts not recorded in it are refused."
    ),
) -> None:
    """Authenticate to HOST once and report the outcome.

    Exits 0 on success, 3 when authentication fails, 6 on connection errors.
    """
    from sshauth.auth import new_instance

    transport: Optional[paramiko.Transport] = None
    try:
        config = load_global_config()
        credential = build_credentials(username, password_source, key_files, passphrase_source)
        if known_hosts is None and config.known_hosts:
            known_hosts = Path(config.known_hosts)

        transport = open_transport(host, port, timeout or config.connect_timeout)
        verify_host_key(transport, host, port, known_hosts)

        authenticator = new_instance(transport, credential)
        debug(f"Using {authenticator!r}")
        if not authenticator.authenticate(get_output().listener()):
            raise AuthError(f"Authentication as {username} on {host}:{port} failed")
    except ValidationError as exc:
        error(f"Invalid credential options: {exc}")
        raise typer.Exit(code=InvalidUsageError.exit_code) from None
    except SshAuthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    finally:
        if transport is not None:
            transport.close()

    success(f"Authenticated as {username} on {host}:{port}")
