"""Canonical Pydantic models shared across all sshauth modules.

The models fall into two groups:

**Credential models** -- the values an authenticator is bound to:
    :class:`Credentials`, :class:`SSHUser`, :class:`UsernamePasswordCredentials`
    and :class:`SSHUserPrivateKey`. Only :class:`SSHUser` and its subclasses
    are usable for SSH authentication; see
    :func:`~sshauth.auth.resolver.filter_credentials`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`PluginsConfig` and :class:`GlobalConfig`.

Credential models are frozen: an authenticator holds on to the credential it
was constructed with and relies on it not changing underneath it.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


# --- Credentials ---


def _new_credential_id() -> str:
    return uuid.uuid4().hex


class Credentials(BaseModel):
    """Base class for every credential handed to the resolver.

    Credentials that are not :class:`SSHUser` instances (API tokens,
    certificates for other protocols, ...) may still be passed to
    :func:`~sshauth.auth.resolver.filter_credentials`; they are simply
    dropped.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=_new_credential_id,
        description="Identifier used in diagnostics (never the secret itself)",
    )
    description: str = Field(default="", description="Free-form description")


class SSHUser(Credentials):
    """A credential that names the user to authenticate as over SSH."""

    username: str = Field(min_length=1, description="Remote user name")


class UsernamePasswordCredentials(SSHUser):
    """Username and password, used for ``password`` and ``keyboard-interactive`` auth.

    Example::

        UsernamePasswordCredentials(username="deploy", password="hunter2")
    """

    password: SecretStr


class SSHUserPrivateKey(SSHUser):
    """Username and one or more private keys, used for ``publickey`` auth.

    Keys are the text of OpenSSH or PEM encoded private keys and are offered
    to the server in the order given. A single ``passphrase`` applies to all
    encrypted keys.
    """

    private_keys: list[str] = Field(min_length=1)
    passphrase: Optional[SecretStr] = None


# --- Configuration ---


class PluginsConfig(BaseModel):
    """Explicit allow/deny lists for authenticator factory entry points."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/sshauth/config.json``.

    Loaded and saved by :func:`~sshauth.config.load_global_config` and
    :func:`~sshauth.config.save_global_config`.
    """

    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    connect_timeout: float = Field(
        default=10.0, gt=0, description="TCP connect and banner timeout in seconds"
    )
    known_hosts: Optional[str] = Field(
        default=None, description="known_hosts file used to verify server host keys"
    )
