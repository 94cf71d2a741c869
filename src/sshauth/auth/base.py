"""Authentication strategies and the one-shot authenticator that drives them.

This module defines the foundational types of the auth subsystem:

- :class:`Mode` -- whether a strategy authenticates before or after the
  transport handshake.
- :class:`AuthState` -- the three states of an authenticator.
- :class:`AuthStrategy` -- the abstract base class every authentication
  strategy extends.
- :class:`SSHAuthenticator` -- binds a strategy to one connection and one
  credential and runs it at most once.

To implement a new strategy, subclass :class:`AuthStrategy` and implement
:meth:`~AuthStrategy.do_authenticate`. Optionally override
:meth:`~AuthStrategy.can_authenticate` to check that the connection is ready,
and set :attr:`~AuthStrategy.mode` for strategies that must run before the
session exists.

See Also:
    :mod:`sshauth.auth.factory` for exposing a strategy to the resolver.
"""

from __future__ import annotations

import enum
import logging
import threading
import warnings
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Optional, TypeVar

from sshauth.listener import ConsoleListener, TaskListener, listener_or_null

C = TypeVar("C")
U = TypeVar("U")

_MISSING: Any = object()


class Mode(str, enum.Enum):
    """The point in the connection lifecycle at which a strategy authenticates."""

    BEFORE_CONNECT = "before_connect"
    """Authentication happens before the transport handshake.

    The caller must carry on as if authentication succeeded, so
    :meth:`SSHAuthenticator.authenticate` always returns ``True``.
    """

    AFTER_CONNECT = "after_connect"
    """Authentication happens on an established connection (the default)."""


class AuthState(str, enum.Enum):
    """Lifecycle of an :class:`SSHAuthenticator`. Both outcomes are terminal."""

    UNTRIED = "untried"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AuthStrategy(ABC, Generic[C, U]):
    """Abstract base class for authentication strategies.

    A strategy holds the protocol-specific logic and no state of its own:
    the connection, credential and listener are passed in by the
    :class:`SSHAuthenticator` running it.
    """

    mode: ClassVar[Mode] = Mode.AFTER_CONNECT

    def can_authenticate(self, connection: C, credential: U) -> bool:
        """Return whether *connection* is in a state where an attempt can be made.

        The authenticator only consults this while it is still untried, so
        overrides need not track previous attempts themselves.
        """
        return True

    @abstractmethod
    def do_authenticate(self, connection: C, credential: U, listener: TaskListener) -> bool:
        """Authenticate *connection* using *credential*.

        Implementations should explain a failure on *listener* before
        returning ``False`` and write nothing on success. Exceptions are
        tolerated: the authenticator logs them and records a failure.

        Returns:
            ``True`` if and only if authentication succeeded.
        """
        ...


class SSHAuthenticator(Generic[C, U]):
    """Runs an :class:`AuthStrategy` at most once against a bound connection.

    The authenticator starts :attr:`~AuthState.UNTRIED`. The first call to
    :meth:`authenticate` runs the strategy and moves it to
    :attr:`~AuthState.SUCCEEDED` or :attr:`~AuthState.FAILED`; every later
    call returns the recorded outcome without touching the connection.
    Concurrent callers are serialised on a per-instance lock, so exactly one
    of them runs the strategy.

    The :attr:`listener` is a plain attribute. A listener swapped in while
    another thread is inside :meth:`authenticate` may or may not receive that
    attempt's messages; set it before handing the authenticator to a worker
    thread if attribution matters.

    Args:
        connection: The connection to authenticate.
        credential: The credential to authenticate with.
        strategy: The strategy that performs the exchange.

    Raises:
        TypeError: If any argument is ``None``.

    Example::

        authenticator = SSHAuthenticator(transport, user, PasswordStrategy())
        if authenticator.authenticate(ConsoleListener.from_stderr()):
            channel = transport.open_session()
    """

    def __init__(self, connection: C, credential: U, strategy: AuthStrategy[C, U]) -> None:
        if connection is None:
            raise TypeError("connection must not be None")
        if credential is None:
            raise TypeError("credential must not be None")
        if strategy is None:
            raise TypeError("strategy must not be None")
        self._connection = connection
        self._credential = credential
        self._strategy = strategy
        # Re-entrant: authenticate() calls can_authenticate() and
        # is_authenticated() while holding it.
        self._lock = threading.RLock()
        self._state = AuthState.UNTRIED
        self._listener: TaskListener = ConsoleListener.from_stderr()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(strategy={type(self._strategy).__name__}, "
            f"state={self.state.value})"
        )

    # ------------------------------------------------------------------
    # Bound values
    # ------------------------------------------------------------------

    @property
    def connection(self) -> C:
        """The bound connection."""
        return self._connection

    @property
    def credential(self) -> U:
        """The bound credential."""
        return self._credential

    @property
    def strategy(self) -> AuthStrategy[C, U]:
        return self._strategy

    @property
    def mode(self) -> Mode:
        """The :class:`Mode` of the bound strategy."""
        return self._strategy.mode

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    @property
    def listener(self) -> TaskListener:
        """The listener that receives failure diagnostics.

        Assigning ``None`` installs :data:`~sshauth.listener.NULL_LISTENER`,
        which suppresses reporting. That is useful when the caller intends to
        try another credential if this one fails.
        """
        return self._listener

    @listener.setter
    def listener(self, listener: Optional[TaskListener]) -> None:
        self._listener = listener_or_null(listener)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> AuthState:
        with self._lock:
            return self._state

    def can_authenticate(self) -> bool:
        """Return ``True`` if an authentication attempt can still be made.

        False once an attempt has been made, or when the strategy reports
        that the connection is not ready.
        """
        with self._lock:
            if self._state is not AuthState.UNTRIED:
                return False
            return self._strategy.can_authenticate(self._connection, self._credential)

    def is_authenticated(self) -> bool:
        """Return ``True`` if the bound connection has been authenticated."""
        with self._lock:
            return self._state is AuthState.SUCCEEDED

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def authenticate(self, listener: Optional[TaskListener] = _MISSING) -> bool:
        """Authenticate the bound connection using the bound credential.

        Args:
            listener: Receives failure diagnostics; ``None`` suppresses them.
                Calling without a listener is deprecated and reuses the
                currently configured one.

        Returns:
            For a strategy in :attr:`Mode.BEFORE_CONNECT` always ``True``;
            otherwise ``True`` if and only if authentication succeeded.
        """
        if listener is _MISSING:
            warnings.warn(
                "authenticate() without a listener is deprecated; "
                "pass the listener that should receive errors",
                DeprecationWarning,
                stacklevel=2,
            )
        else:
            self.listener = listener

        with self._lock:
            if self.can_authenticate():
                self._state = AuthState.SUCCEEDED if self._run_strategy() else AuthState.FAILED
            return self.is_authenticated() or self.mode is Mode.BEFORE_CONNECT

    def _run_strategy(self) -> bool:
        try:
            return bool(
                self._strategy.do_authenticate(
                    self._connection, self._credential, self._listener
                )
            )
        except Exception:
            strategy_type = type(self._strategy)
            logging.getLogger(
                f"{strategy_type.__module__}.{strategy_type.__qualname__}"
            ).warning("Uncaught exception escaped do_authenticate", exc_info=True)
            return False
