"""Authenticator factories -- the unit registered with a :class:`FactoryRegistry`.

A factory answers two questions for the resolver:

- :meth:`~AuthenticatorFactory.supports` -- can it, in principle, handle a
  given connection type and credential type? Used by
  :func:`~sshauth.auth.resolver.is_supported` without creating anything.
- :meth:`~AuthenticatorFactory.try_create` -- given a concrete connection and
  credential, build an :class:`~sshauth.auth.base.SSHAuthenticator`, or
  return ``None`` if it cannot.

Most factories bind a single strategy to fixed types and can simply extend
:class:`StrategyFactory`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from sshauth.auth.base import AuthStrategy, SSHAuthenticator


class AuthenticatorFactory(ABC):
    """Base class for everything the resolver can ask for an authenticator.

    Factories are registered as entry points in the ``sshauth.authenticators``
    group, or added directly with
    :meth:`~sshauth.auth.registry.FactoryRegistry.register`.
    """

    ordinal: ClassVar[float] = 0.0
    """Discovery priority. Factories with a higher ordinal are tried first."""

    @property
    def name(self) -> str:
        """Unique name used for registration and diagnostics.

        Defaults to the class name.
        """
        return type(self).__name__

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def supports(self, connection_type: type, credential_type: type) -> bool:
        """Return whether this factory handles the given pair of types."""
        ...

    @abstractmethod
    def try_create(self, connection: Any, credential: Any) -> Optional[SSHAuthenticator]:
        """Create an authenticator bound to *connection* and *credential*.

        Returns:
            The authenticator, or ``None`` if this factory cannot handle the
            pair.
        """
        ...


class StrategyFactory(AuthenticatorFactory):
    """Factory that binds one :class:`AuthStrategy` class to fixed types.

    Subclasses set three class attributes::

        class PasswordFactory(StrategyFactory):
            connection_types = (paramiko.Transport,)
            credential_types = (UsernamePasswordCredentials,)
            strategy_class = PasswordStrategy

    Type checks accept subclasses, so a factory declared for
    :class:`~sshauth.models.SSHUser` supports every kind of SSH user.
    """

    connection_types: ClassVar[tuple[type, ...]] = ()
    credential_types: ClassVar[tuple[type, ...]] = ()
    strategy_class: ClassVar[Optional[type[AuthStrategy]]] = None

    def supports(self, connection_type: type, credential_type: type) -> bool:
        if not self.connection_types or not self.credential_types:
            return False
        return issubclass(connection_type, self.connection_types) and issubclass(
            credential_type, self.credential_types
        )

    def create_strategy(self) -> AuthStrategy:
        """Instantiate the strategy. Override to pass constructor arguments."""
        if self.strategy_class is None:
            raise NotImplementedError(
                f"{type(self).__name__} must set strategy_class or override create_strategy()"
            )
        return self.strategy_class()

    def try_create(self, connection: Any, credential: Any) -> Optional[SSHAuthenticator]:
        if not self.connection_types or not self.credential_types:
            return None
        if not isinstance(connection, self.connection_types):
            return None
        if not isinstance(credential, self.credential_types):
            return None
        return SSHAuthenticator(connection, credential, self.create_strategy())
