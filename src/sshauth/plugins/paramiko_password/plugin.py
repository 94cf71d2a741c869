"""Password authentication strategy for :class:`paramiko.Transport`.

The strategy first offers the ``password`` method. Servers configured for
PAM often refuse it while still accepting ``keyboard-interactive``; in that
case every hidden prompt is answered with the password.

See Also:
    :class:`sshauth.auth.base.AuthStrategy` for the base interface.
"""

from __future__ import annotations

import logging

import paramiko

from sshauth.auth.base import AuthStrategy
from sshauth.auth.factory import StrategyFactory
from sshauth.listener import TaskListener
from sshauth.models import UsernamePasswordCredentials

logger = logging.getLogger(__name__)

KEYBOARD_INTERACTIVE = "keyboard-interactive"


class _PasswordPromptHandler:
    """Answers keyboard-interactive challenges with a fixed password.

    Hidden prompts receive the password, echoed prompts an empty string.
    """

    def __init__(self, password: str) -> None:
        self._password = password

    def __call__(
        self, title: str, instructions: str, prompt_list: list[tuple[str, bool]]
    ) -> list[str]:
        return ["" if echo else self._password for _prompt, echo in prompt_list]


class ParamikoPasswordStrategy(AuthStrategy[paramiko.Transport, UsernamePasswordCredentials]):
    """Authenticate a negotiated transport with a username and password."""

    def can_authenticate(
        self, connection: paramiko.Transport, credential: UsernamePasswordCredentials
    ) -> bool:
        return connection.is_active() and not connection.is_authenticated()

    def do_authenticate(
        self,
        connection: paramiko.Transport,
        credential: UsernamePasswordCredentials,
        listener: TaskListener,
    ) -> bool:
        username = credential.username
        password = credential.password.get_secret_value()

        try:
            # paramiko's built-in fallback would repeat the keyboard-interactive attempt below.
            connection.auth_password(username, password, fallback=False)
        except paramiko.BadAuthenticationType as exc:
            if KEYBOARD_INTERACTIVE not in exc.allowed_types:
                listener.error(
                    f"Server does not accept password authentication for {username} "
                    f"(credentialId:{credential.id}, allowed methods: "
                    f"{', '.join(exc.allowed_types) or 'none'})"
                )
                return False
            logger.debug("Password method refused, falling back to %s", KEYBOARD_INTERACTIVE)
            return self._authenticate_interactive(connection, credential, password, listener)
        except paramiko.AuthenticationException as exc:
            listener.error(
                f"Failed to authenticate as {username} with credential={credential.id}: {exc}"
            )
            return False

        return self._check_complete(connection, credential, listener)

    def _authenticate_interactive(
        self,
        connection: paramiko.Transport,
        credential: UsernamePasswordCredentials,
        password: str,
        listener: TaskListener,
    ) -> bool:
        try:
            connection.auth_interactive(credential.username, _PasswordPromptHandler(password))
        except paramiko.AuthenticationException as exc:
            listener.error(
                f"Failed to authenticate as {credential.username} with "
                f"credential={credential.id} (method:{KEYBOARD_INTERACTIVE}): {exc}"
            )
            return False
        return self._check_complete(connection, credential, listener)

    @staticmethod
    def _check_complete(
        connection: paramiko.Transport,
        credential: UsernamePasswordCredentials,
        listener: TaskListener,
    ) -> bool:
        if connection.is_authenticated():
            return True
        listener.error(
            f"Password accepted for {credential.username} but the server requires "
            f"further authentication (credentialId:{credential.id})"
        )
        return False


class ParamikoPasswordAuthenticatorFactory(StrategyFactory):
    """Provides :class:`ParamikoPasswordStrategy` for paramiko transports."""

    connection_types = (paramiko.Transport,)
    credential_types = (UsernamePasswordCredentials,)
    strategy_class = ParamikoPasswordStrategy

    @property
    def name(self) -> str:
        return "paramiko-password"

    @property
    def description(self) -> str:
        return "password / keyboard-interactive over paramiko"
