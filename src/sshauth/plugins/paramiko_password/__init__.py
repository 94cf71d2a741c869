"""Password authentication for paramiko transports.

Implements the ``password`` SSH user-auth method with a
``keyboard-interactive`` fallback for servers that only prompt.

See Also:
    :class:`~sshauth.plugins.paramiko_password.plugin.ParamikoPasswordStrategy`
"""

from sshauth.plugins.paramiko_password.plugin import (
    ParamikoPasswordAuthenticatorFactory,
    ParamikoPasswordStrategy,
)

__all__ = ["ParamikoPasswordAuthenticatorFactory", "ParamikoPasswordStrategy"]
