"""Factory registry -- discovery, ordering, and lookup of authenticator factories.

This module contains :class:`FactoryRegistry`, the ordered collection the
resolver walks. Factories are discovered from Python entry points in the
``sshauth.authenticators`` group, so third-party packages can contribute
strategies by declaring an entry point in their ``pyproject.toml``::

    [project.entry-points."sshauth.authenticators"]
    my-factory = "my_package.factory:MyAuthenticatorFactory"

Order matters: the resolver accepts the first factory that yields a usable
authenticator.
"""

from __future__ import annotations

import importlib.metadata
import logging
import threading
from typing import Iterable, Iterator, Optional

from sshauth.auth.factory import AuthenticatorFactory
from sshauth.exceptions import PluginError
from sshauth.models import GlobalConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "sshauth.authenticators"
"""The entry-point group name used for factory discovery."""


class FactoryRegistry:
    """Ordered collection of :class:`~sshauth.auth.factory.AuthenticatorFactory`.

    Factories are kept in registration order. :meth:`discover` registers the
    factories it finds sorted by descending
    :attr:`~sshauth.auth.factory.AuthenticatorFactory.ordinal`, then by entry
    point name, after anything registered explicitly beforehand.

    The *enabled* and *disabled* lists in
    :class:`~sshauth.models.PluginsConfig` act as an explicit
    allowlist/blocklist of entry-point names during discovery.

    Example::

        registry = FactoryRegistry()
        registry.discover(load_global_config())
        authenticator = new_instance(transport, user, registry=registry)
    """

    def __init__(self, factories: Iterable[AuthenticatorFactory] = ()) -> None:
        self._factories: dict[str, AuthenticatorFactory] = {}
        for factory in factories:
            self.register(factory)

    def __iter__(self) -> Iterator[AuthenticatorFactory]:
        # Snapshot so a concurrent register() cannot break an ongoing walk.
        return iter(list(self._factories.values()))

    def __len__(self) -> int:
        return len(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, config: Optional[GlobalConfig] = None) -> list[str]:
        """Discover and register factories via Python entry points.

        Args:
            config: Supplies the ``plugins.enabled`` and ``plugins.disabled``
                lists. Defaults to an empty :class:`GlobalConfig`.

        Returns:
            The names of the entry points that were registered, in
            registration order. Entry points that fail to load are logged
            as warnings and skipped.
        """
        config = config or GlobalConfig()
        enabled_set = set(config.plugins.enabled)
        disabled_set = set(config.plugins.disabled)

        entry_points = importlib.metadata.entry_points()
        if hasattr(entry_points, "select"):
            eps = entry_points.select(group=ENTRY_POINT_GROUP)
        else:
            eps = entry_points.get(ENTRY_POINT_GROUP, [])  # type: ignore[union-attr]

        found: list[tuple[str, AuthenticatorFactory]] = []
        for ep in eps:
            name = ep.name
            if enabled_set and name not in enabled_set:
                logger.debug("Factory '%s' not in enabled list, skipping", name)
                continue
            if name in disabled_set:
                logger.debug("Factory '%s' is disabled, skipping", name)
                continue
            if name in self._factories:
                logger.debug("Factory '%s' already registered, skipping", name)
                continue
            try:
                factory_cls = ep.load()
                factory: AuthenticatorFactory = factory_cls()
            except Exception as exc:
                logger.warning("Failed to load authenticator factory '%s': %s", name, exc)
                continue
            found.append((name, factory))

        found.sort(key=lambda item: (-item[1].ordinal, item[0]))
        for name, factory in found:
            self.register(factory, name=name)
        return [name for name, _ in found]

    # ------------------------------------------------------------------
    # Registration and lookup
    # ------------------------------------------------------------------

    def register(self, factory: AuthenticatorFactory, name: Optional[str] = None) -> None:
        """Append *factory* to the registry.

        Args:
            factory: The factory instance.
            name: Registration name. Defaults to ``factory.name``.

        Raises:
            PluginError: If a factory with the same name is already registered.
        """
        key = name or factory.name
        if key in self._factories:
            raise PluginError(f"Authenticator factory '{key}' is already registered")
        self._factories[key] = factory
        logger.debug("Registered authenticator factory '%s'", key)

    def unregister(self, name: str) -> AuthenticatorFactory:
        """Remove and return the factory registered under *name*.

        Raises:
            PluginError: If no factory is registered under *name*.
        """
        try:
            return self._factories.pop(name)
        except KeyError:
            raise PluginError(f"Authenticator factory '{name}' is not registered") from None

    def get(self, name: str) -> AuthenticatorFactory:
        """Retrieve a registered factory by name.

        Raises:
            PluginError: If no factory is registered under *name*.
        """
        try:
            return self._factories[name]
        except KeyError:
            available = ", ".join(self._factories) or "(none)"
            raise PluginError(
                f"Authenticator factory '{name}' is not registered. "
                f"Available factories: {available}"
            ) from None

    def list_factories(self) -> list[dict[str, str]]:
        """List registered factories with their metadata, in order.

        Returns:
            A list of dicts with ``"name"``, ``"ordinal"``, ``"class"`` and
            ``"description"`` keys.
        """
        return [
            {
                "name": name,
                "ordinal": f"{factory.ordinal:g}",
                "class": f"{type(factory).__module__}.{type(factory).__qualname__}",
                "description": factory.description,
            }
            for name, factory in self._factories.items()
        ]


_default_registry: Optional[FactoryRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> FactoryRegistry:
    """Return the process-wide registry, discovering factories on first use.

    Discovery honours the allow/deny lists of the global configuration
    (see :func:`~sshauth.config.load_global_config`).
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            from sshauth.config import load_global_config

            registry = FactoryRegistry()
            registry.discover(load_global_config())
            _default_registry = registry
        return _default_registry


def set_default_registry(registry: FactoryRegistry) -> None:
    """Install *registry* as the process-wide registry."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = registry


def reset_default_registry() -> None:
    """Forget the process-wide registry so the next use rediscovers it."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = None
