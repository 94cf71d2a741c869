"""Resolve an authenticator for a connection/credential pair.

The resolver is the entry point callers use instead of constructing
authenticators themselves:

- :func:`new_instance` -- walk the registry and return the first usable
  authenticator, or one that always fails.
- :func:`is_supported` -- does any factory handle a pair of types?
- :func:`filter_credentials` -- keep only the credentials usable with a
  connection type.

Every function takes an optional ``registry``; when omitted the process-wide
registry from :func:`~sshauth.auth.registry.get_default_registry` is used.
The resolver never modifies the registry it walks.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, TypeVar

from sshauth.auth.base import AuthStrategy, SSHAuthenticator
from sshauth.auth.factory import AuthenticatorFactory
from sshauth.auth.registry import get_default_registry
from sshauth.listener import TaskListener
from sshauth.models import SSHUser

logger = logging.getLogger(__name__)

C = TypeVar("C")
U = TypeVar("U")


class NoAuthenticatorStrategy(AuthStrategy[Any, Any]):
    """Strategy used when no registered factory can handle a pair. Always fails."""

    def do_authenticate(self, connection: Any, credential: Any, listener: TaskListener) -> bool:
        listener.error(
            f"No authenticator available for {type(connection).__name__} "
            f"with {type(credential).__name__} credentials"
        )
        return False


def _factories(
    registry: Optional[Iterable[AuthenticatorFactory]],
) -> Iterable[AuthenticatorFactory]:
    return get_default_registry() if registry is None else registry


def new_instance(
    connection: C,
    credential: U,
    registry: Optional[Iterable[AuthenticatorFactory]] = None,
) -> SSHAuthenticator[C, U]:
    """Create an authenticator that may be able to authenticate *connection*.

    Factories are asked in registry order; the first authenticator that is
    returned and reports :meth:`~SSHAuthenticator.can_authenticate` wins.

    Args:
        connection: The connection to authenticate on.
        credential: The credential to authenticate with.
        registry: Factories to consult, in order.

    Returns:
        An authenticator. When nothing matched it is bound to
        :class:`NoAuthenticatorStrategy` and always fails, so callers never
        have to handle a missing result.

    Raises:
        TypeError: If *connection* or *credential* is ``None``.
    """
    if connection is None:
        raise TypeError("connection must not be None")
    if credential is None:
        raise TypeError("credential must not be None")

    for factory in _factories(registry):
        result = factory.try_create(connection, credential)
        if result is not None and result.can_authenticate():
            logger.debug(
                "Factory '%s' selected for %s/%s",
                factory.name,
                type(connection).__name__,
                type(credential).__name__,
            )
            return result

    logger.debug(
        "No factory can authenticate %s with %s",
        type(connection).__name__,
        type(credential).__name__,
    )
    return SSHAuthenticator(connection, credential, NoAuthenticatorStrategy())


def is_supported(
    connection_type: type,
    credential_type: type,
    registry: Optional[Iterable[AuthenticatorFactory]] = None,
) -> bool:
    """Return ``True`` if at least one factory supports the pair of types.

    Raises:
        TypeError: If either argument is ``None``.
    """
    if connection_type is None:
        raise TypeError("connection_type must not be None")
    if credential_type is None:
        raise TypeError("credential_type must not be None")
    return any(
        factory.supports(connection_type, credential_type)
        for factory in _factories(registry)
    )


def filter_credentials(
    credentials: Iterable[Any],
    connection_type: type,
    registry: Optional[Iterable[AuthenticatorFactory]] = None,
) -> list[SSHUser]:
    """Filter *credentials* down to the SSH users usable with *connection_type*.

    Values that are not :class:`~sshauth.models.SSHUser` instances are
    dropped. Relative order is preserved and duplicates are kept.

    Raises:
        TypeError: If *credentials* or *connection_type* is ``None``.
    """
    if credentials is None:
        raise TypeError("credentials must not be None")
    if connection_type is None:
        raise TypeError("connection_type must not be None")

    # Materialise once: the default registry would otherwise be looked up per item.
    factories = list(_factories(registry))
    return [
        credential
        for credential in credentials
        if isinstance(credential, SSHUser)
        and is_supported(connection_type, type(credential), registry=factories)
    ]
