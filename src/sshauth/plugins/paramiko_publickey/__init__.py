"""Public-key authentication for paramiko transports.

See Also:
    :class:`~sshauth.plugins.paramiko_publickey.plugin.ParamikoPublicKeyStrategy`
"""

from sshauth.plugins.paramiko_publickey.plugin import (
    ParamikoPublicKeyAuthenticatorFactory,
    ParamikoPublicKeyStrategy,
    load_private_key,
)

__all__ = [
    "ParamikoPublicKeyAuthenticatorFactory",
    "ParamikoPublicKeyStrategy",
    "load_private_key",
]
