"""Tests for AuthenticatorFactory and StrategyFactory."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from conftest import FakeConnection, OtherConnection
from sshauth.auth.base import AuthStrategy, SSHAuthenticator
from sshauth.auth.factory import AuthenticatorFactory, StrategyFactory
from sshauth.listener import TaskListener
from sshauth.models import (
    SSHUser,
    SSHUserPrivateKey,
    UsernamePasswordCredentials,
)


class AlwaysStrategy(AuthStrategy[Any, Any]):
    def do_authenticate(self, connection: Any, credential: Any, listener: TaskListener) -> bool:
        return True


class SubFakeConnection(FakeConnection):
    pass


class PasswordFactory(StrategyFactory):
    connection_types = (FakeConnection,)
    credential_types = (UsernamePasswordCredentials,)
    strategy_class = AlwaysStrategy


class AnyUserFactory(StrategyFactory):
    connection_types = (FakeConnection,)
    credential_types = (SSHUser,)
    strategy_class = AlwaysStrategy


class UnboundFactory(StrategyFactory):
    connection_types = (FakeConnection,)
    credential_types = (SSHUser,)


class EmptyFactory(StrategyFactory):
    strategy_class = AlwaysStrategy


class TestAuthenticatorFactory:
    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            AuthenticatorFactory()  # type: ignore[abstract]

    def test_defaults(self) -> None:
        class Minimal(AuthenticatorFactory):
            def supports(self, connection_type: type, credential_type: type) -> bool:
                return False

            def try_create(self, connection: Any, credential: Any) -> Optional[SSHAuthenticator]:
                return None

        factory = Minimal()
        assert factory.name == "Minimal"
        assert factory.description == ""
        assert factory.ordinal == 0.0


class TestStrategyFactorySupports:
    def test_exact_types(self) -> None:
        assert PasswordFactory().supports(FakeConnection, UsernamePasswordCredentials)

    def test_subclass_connection(self) -> None:
        assert PasswordFactory().supports(SubFakeConnection, UsernamePasswordCredentials)

    def test_wrong_credential_type(self) -> None:
        assert not PasswordFactory().supports(FakeConnection, SSHUserPrivateKey)

    def test_wrong_connection_type(self) -> None:
        assert not PasswordFactory().supports(OtherConnection, UsernamePasswordCredentials)

    def test_base_credential_type_covers_subclasses(self) -> None:
        factory = AnyUserFactory()
        assert factory.supports(FakeConnection, SSHUserPrivateKey)
        assert factory.supports(FakeConnection, UsernamePasswordCredentials)

    def test_no_declared_types_supports_nothing(self) -> None:
        assert not EmptyFactory().supports(FakeConnection, UsernamePasswordCredentials)


class TestStrategyFactoryTryCreate:
    def test_creates_bound_authenticator(
        self, connection: FakeConnection, password_user: UsernamePasswordCredentials
    ) -> None:
        result = PasswordFactory().try_create(connection, password_user)
        assert isinstance(result, SSHAuthenticator)
        assert result.connection is connection
        assert result.credential is password_user
        assert isinstance(result.strategy, AlwaysStrategy)

    def test_fresh_strategy_each_time(
        self, connection: FakeConnection, password_user: UsernamePasswordCredentials
    ) -> None:
        factory = PasswordFactory()
        first = factory.try_create(connection, password_user)
        second = factory.try_create(connection, password_user)
        assert first is not second
        assert first.strategy is not second.strategy

    def test_wrong_connection_returns_none(
        self, password_user: UsernamePasswordCredentials
    ) -> None:
        assert PasswordFactory().try_create(OtherConnection(), password_user) is None

    def test_wrong_credential_returns_none(
        self, connection: FakeConnection, key_user: SSHUserPrivateKey
    ) -> None:
        assert PasswordFactory().try_create(connection, key_user) is None

    def test_no_declared_types_returns_none(
        self, connection: FakeConnection, password_user: UsernamePasswordCredentials
    ) -> None:
        assert EmptyFactory().try_create(connection, password_user) is None

    def test_missing_strategy_class(
        self, connection: FakeConnection, key_user: SSHUserPrivateKey
    ) -> None:
        with pytest.raises(NotImplementedError, match="strategy_class"):
            UnboundFactory().try_create(connection, key_user)

    def test_create_strategy_override(
        self, connection: FakeConnection, password_user: UsernamePasswordCredentials
    ) -> None:
        class Configured(AlwaysStrategy):
            def __init__(self, retries: int) -> None:
                self.retries = retries

        class ConfiguredFactory(PasswordFactory):
            def create_strategy(self) -> AuthStrategy:
                return Configured(retries=3)

        result = ConfiguredFactory().try_create(connection, password_user)
        assert result is not None
        assert result.strategy.retries == 3
