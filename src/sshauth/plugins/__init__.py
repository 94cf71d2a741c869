"""Built-in authenticator factories.

Each sub-package contributes one :class:`~sshauth.auth.factory.StrategyFactory`
registered in the ``sshauth.authenticators`` entry-point group:

* ``paramiko-password`` -- :mod:`sshauth.plugins.paramiko_password`
* ``paramiko-publickey`` -- :mod:`sshauth.plugins.paramiko_publickey`

Both authenticate an already negotiated :class:`paramiko.Transport`.
"""
