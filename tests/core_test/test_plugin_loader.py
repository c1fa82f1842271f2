# tests/core_test/test_plugin_loader.py
"""
Plugin loader tests — registration and lookup.
"""
import pytest

from graph_console_api.plugins import DriverPlugin

from graph_console.plugin_loader import DRIVER_EP_GROUP, PluginLoader, create_driver_loader
from memory_driver import MemoryDriverPlugin


@pytest.fixture
def loader() -> PluginLoader:
    return PluginLoader(DriverPlugin, "graph_console.tests-empty")


class TestPluginLoader:

    def test_empty_group(self, loader):
        assert loader.load_all() == {}
        assert len(loader) == 0
        assert loader.get_names() == []

    def test_register(self, loader):
        plugin = MemoryDriverPlugin()
        loader.register("memory", plugin)
        assert loader.get("memory") is plugin
        assert "memory" in loader
        assert len(loader) == 1

    def test_names_are_sorted(self, loader):
        loader.register("zeta", MemoryDriverPlugin())
        loader.register("alpha", MemoryDriverPlugin())
        assert loader.get_names() == ["alpha", "zeta"]

    def test_register_wrong_type(self, loader):
        with pytest.raises(TypeError):
            loader.register("bogus", object())

    def test_get_missing(self, loader):
        assert loader.get("nope") is None
        assert "nope" not in loader

    def test_repr(self, loader):
        assert repr(loader) == "PluginLoader(base=DriverPlugin, group='graph_console.tests-empty', loaded=0)"

    def test_driver_loader_group(self):
        assert repr(create_driver_loader()).startswith(
            f"PluginLoader(base=DriverPlugin, group='{DRIVER_EP_GROUP}'")
