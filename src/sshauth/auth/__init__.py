"""Pluggable, one-shot authentication of SSH connections.

The main entry points are:

- :class:`SSHAuthenticator` -- binds a strategy to one connection and one
  credential and runs it at most once.
- :class:`AuthStrategy` -- abstract base class for implementing new
  authentication strategies.
- :class:`AuthenticatorFactory` / :class:`StrategyFactory` -- expose
  strategies to the resolver.
- :class:`FactoryRegistry` -- ordered collection of factories, discovered
  from the ``sshauth.authenticators`` entry-point group.
- :func:`new_instance`, :func:`is_supported`, :func:`filter_credentials` --
  the resolver.

Typical usage::

    from sshauth.auth import new_instance

    authenticator = new_instance(transport, credentials)
    if authenticator.authenticate(listener):
        session = transport.open_session()
"""

from sshauth.auth.base import AuthState, AuthStrategy, Mode, SSHAuthenticator
from sshauth.auth.factory import AuthenticatorFactory, StrategyFactory
from sshauth.auth.registry import (
    ENTRY_POINT_GROUP,
    FactoryRegistry,
    get_default_registry,
    reset_default_registry,
    set_default_registry,
)
from sshauth.auth.resolver import (
    NoAuthenticatorStrategy,
    filter_credentials,
    is_supported,
    new_instance,
)

__all__ = [
    "AuthState",
    "AuthStrategy",
    "AuthenticatorFactory",
    "ENTRY_POINT_GROUP",
    "FactoryRegistry",
    "Mode",
    "NoAuthenticatorStrategy",
    "SSHAuthenticator",
    "StrategyFactory",
    "filter_credentials",
    "get_default_registry",
    "is_supported",
    "new_instance",
    "reset_default_registry",
    "set_default_registry",
]
