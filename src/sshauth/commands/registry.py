"""Registry commands -- inspect the authenticator factories that are installed.

Typical usage::

    sshauth factories
    sshauth supports transport publickey
    sshauth supports paramiko.Transport my_pkg.creds.HardwareToken
"""

from __future__ import annotations

import importlib

import typer

from sshauth.exceptions import InvalidUsageError, SshAuthError
from sshauth.exit_codes import EXIT_AUTH_FAILURE
from sshauth.models import SSHUser, SSHUserPrivateKey, UsernamePasswordCredentials
from sshauth.output import error, info, print_data, print_table

TYPE_ALIASES: dict[str, str] = {
    "transport": "paramiko.Transport",
    "password": f"{UsernamePasswordCredentials.__module__}.{UsernamePasswordCredentials.__qualname__}",
    "publickey": f"{SSHUserPrivateKey.__module__}.{SSHUserPrivateKey.__qualname__}",
    "user": f"{SSHUser.__module__}.{SSHUser.__qualname__}",
}


def resolve_type(name: str) -> type:
    """Resolve an alias or a dotted ``module.Class`` path to a class.

    Raises:
        InvalidUsageError: If the name cannot be imported or is not a class.
    """
    dotted = TYPE_ALIASES.get(name, name)
    module_name, _, attr = dotted.rpartition(".")
    if not module_name:
        raise InvalidUsageError(
            f"'{name}' is neither an alias ({', '.join(sorted(TYPE_ALIASES))}) "
            "nor a dotted module.Class path"
        )
    try:
        obj = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise InvalidUsageError(f"Cannot import '{dotted}': {exc}") from None
    if not isinstance(obj, type):
        raise InvalidUsageError(f"'{dotted}' is not a class")
    return obj


def factories_command() -> None:
    """List the registered authenticator factories in resolution order."""
    from sshauth.auth import get_default_registry

    try:
        entries = get_default_registry().list_factories()
    except SshAuthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not entries:
        info("No authenticator factories are registered.")
        return
    print_table(
        ["Name", "Ordinal", "Class", "Description"],
        [[e["name"], e["ordinal"], e["class"], e["description"]] for e in entries],
        title="Authenticator factories",
    )


def supports_command(
    connection_type: str = typer.Argument(
        help="Connection class: dotted path or alias (transport)."
    ),
    credential_type: str = typer.Argument(
        help="Credential class: dotted path or alias (password, publickey, user)."
    ),
) -> None:
    """Report whether any factory supports a connection/credential pairing.

    Prints ``yes`` and exits 0 when supported, prints ``no`` and exits 3
    otherwise.
    """
    from sshauth.auth import is_supported

    try:
        supported = is_supported(resolve_type(connection_type), resolve_type(credential_type))
    except SshAuthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data("yes" if supported else "no")
    if not supported:
        raise typer.Exit(code=EXIT_AUTH_FAILURE)
