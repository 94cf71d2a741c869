"""Public-key authentication strategy for :class:`paramiko.Transport`.

Private keys are held as text on :class:`~sshauth.models.SSHUserPrivateKey`
and parsed here with :func:`load_private_key`. Keys are offered one at a
time, in order, until the server accepts one.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Optional

import paramiko

from sshauth.auth.base import AuthStrategy
from sshauth.auth.factory import StrategyFactory
from sshauth.listener import TaskListener
from sshauth.models import SSHUserPrivateKey

logger = logging.getLogger(__name__)

_KEY_CLASSES: tuple[type[paramiko.PKey], ...] = (
    paramiko.Ed25519Key,
    paramiko.RSAKey,
    paramiko.ECDSAKey,
)


def load_private_key(key_data: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """Parse an OpenSSH or PEM private key from text.

    Tries Ed25519, RSA and ECDSA in that order.

    Raises:
        paramiko.PasswordRequiredException: If the key is encrypted and no
            passphrase was given.
        paramiko.SSHException: If the text is not a supported private key,
            or the passphrase is wrong.
    """
    key_file = StringIO(key_data)
    for key_class in _KEY_CLASSES:
        try:
            key_file.seek(0)
            return key_class.from_private_key(key_file, password=passphrase)
        except paramiko.PasswordRequiredException:
            raise
        except (paramiko.SSHException, ValueError):
            continue
    raise paramiko.SSHException("Unable to parse private key")


class ParamikoPublicKeyStrategy(AuthStrategy[paramiko.Transport, SSHUserPrivateKey]):
    """Authenticate a negotiated transport with one or more private keys."""

    def can_authenticate(
        self, connection: paramiko.Transport, credential: SSHUserPrivateKey
    ) -> bool:
        return connection.is_active() and not connection.is_authenticated()

    def do_authenticate(
        self,
        connection: paramiko.Transport,
        credential: SSHUserPrivateKey,
        listener: TaskListener,
    ) -> bool:
        username = credential.username
        passphrase = (
            credential.passphrase.get_secret_value() if credential.passphrase else None
        )

        offered = 0
        for index, key_data in enumerate(credential.private_keys, start=1):
            try:
                key = load_private_key(key_data, passphrase)
            except paramiko.PasswordRequiredException:
                listener.error(
                    f"Private key {index} for {username} is encrypted but no passphrase "
                    f"was supplied (credentialId:{credential.id})"
                )
                continue
            except paramiko.SSHException as exc:
                listener.error(
                    f"Could not read private key {index} for {username} "
                    f"(credentialId:{credential.id}): {exc}"
                )
                continue

            offered += 1
            try:
                connection.auth_publickey(username, key)
            except paramiko.BadAuthenticationType as exc:
                listener.error(
                    f"Server does not accept public key authentication for {username} "
                    f"(credentialId:{credential.id}, allowed methods: "
                    f"{', '.join(exc.allowed_types) or 'none'})"
                )
                return False
            except paramiko.AuthenticationException:
                logger.debug("Server rejected %s key %d for %s", key.get_name(), index, username)
                continue

            if connection.is_authenticated():
                return True
            listener.error(
                f"Key accepted for {username} but the server requires further "
                f"authentication (credentialId:{credential.id})"
            )
            return False

        listener.error(
            f"Server rejected the {offered} private key(s) for {username} "
            f"(credentialId:{credential.id}/method:publickey)"
        )
        return False


class ParamikoPublicKeyAuthenticatorFactory(StrategyFactory):
    """Provides :class:`ParamikoPublicKeyStrategy` for paramiko transports."""

    connection_types = (paramiko.Transport,)
    credential_types = (SSHUserPrivateKey,)
    strategy_class = ParamikoPublicKeyStrategy

    @property
    def name(self) -> str:
        return "paramiko-publickey"

    @property
    def description(self) -> str:
        return "public key over paramiko"
