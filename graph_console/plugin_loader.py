"""
    Generic plugin discovery and loading via entry_points.

    Design Pattern: Service Locator / Registry
    ────────────────────────────────────────────
    Discovers all installed driver plugins at runtime by scanning Python
    package entry_points under the ``graph_console.driver`` group.

    Genericity:
    ───────────
    PluginLoader[TPlugin] is generic over the plugin base class so a new
    plugin kind only needs a new group name and base class.
"""
import importlib.metadata
import logging
from typing import TypeVar, Generic, Type, Dict, List, Optional

from graph_console_api.plugins.base import DriverPlugin

logger = logging.getLogger(__name__)

# Generic type variable bounded to plugin ABCs
TPlugin = TypeVar('TPlugin')

# Entry-point group name (must match setup.py)
DRIVER_EP_GROUP = 'graph_console.driver'


class PluginLoader(Generic[TPlugin]):
    """
    Generic loader that discovers all installed plugins of a given type
    from a specific entry-point group.

    Usage:
        loader = PluginLoader(DriverPlugin, 'graph_console.driver')
        plugins = loader.load_all()          # Dict[str, DriverPlugin]
        memory = loader.get('memory')        # Optional[DriverPlugin]
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str):
        """
        Args:
            plugin_base_class: The ABC that every discovered plugin must subclass.
            group:             The entry-point group to scan.
        """
        self._base_class = plugin_base_class
        self._group = group
        self._plugins: Dict[str, TPlugin] = {}
        self._loaded = False

    def load_all(self) -> Dict[str, TPlugin]:
        """
        Discover and instantiate every plugin registered under the group.

        Returns:
            Dict mapping entry-point name → plugin instance.
        """
        if self._loaded:
            return self._plugins

        try:
            entry_points = importlib.metadata.entry_points()

            # Python 3.10+ exposes select(); 3.9 returns a dict of groups
            if hasattr(entry_points, 'select'):
                eps = entry_points.select(group=self._group)
            else:
                eps = entry_points.get(self._group, [])

            for ep in eps:
                try:
                    plugin_cls = ep.load()
                    if not issubclass(plugin_cls, self._base_class):
                        logger.warning(
                            "Plugin '%s' does not subclass %s; skipped.",
                            ep.name, self._base_class.__name__
                        )
                        continue
                    self._plugins[ep.name] = plugin_cls()
                    logger.info("Loaded plugin: %s (%s)", ep.name, plugin_cls.__name__)
                except Exception as exc:
                    logger.error("Failed to load plugin '%s': %s", ep.name, exc)

        except Exception as exc:
            logger.error("Entry-point discovery failed: %s", exc)

        self._loaded = True
        return self._plugins

    def register(self, name: str, plugin: TPlugin) -> None:
        """Register a plugin instance by hand (bypasses entry points)."""
        if not isinstance(plugin, self._base_class):
            raise TypeError(f"{plugin!r} is not a {self._base_class.__name__}")
        self.load_all()
        self._plugins[name] = plugin

    def get(self, name: str) -> Optional[TPlugin]:
        """
        Get a specific plugin by its entry-point name.

        Returns:
            Plugin instance, or None if not found.
        """
        return self.load_all().get(name)

    def get_names(self) -> List[str]:
        """Return sorted list of all discovered plugin names."""
        return sorted(self.load_all().keys())

    def __len__(self) -> int:
        return len(self.load_all())

    def __contains__(self, name: str) -> bool:
        return name in self.load_all()

    def __repr__(self) -> str:
        return (
            f"PluginLoader(base={self._base_class.__name__}, "
            f"group='{self._group}', loaded={len(self._plugins)})"
        )


def create_driver_loader() -> PluginLoader[DriverPlugin]:
    """Create a loader for driver plugins."""
    return PluginLoader(DriverPlugin, DRIVER_EP_GROUP)
