"""Built-in CLI commands.

* :mod:`~sshauth.commands.registry` -- ``factories`` and ``supports``.
* :mod:`~sshauth.commands.connect` -- ``connect``.
"""
