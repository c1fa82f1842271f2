# tests/core_test/test_main.py
"""
Entry point tests — flags, driver selection, run modes and exit status.
"""
import pytest

from graph_console_api.plugins import DriverPlugin

from graph_console import __version__
from graph_console.core import COPYRIGHT
from graph_console.main import DriverNotFoundError, build_parser, main, select_driver
from graph_console.plugin_loader import PluginLoader
from memory_driver import MemoryDriverPlugin

EMPTY_GROUP = "graph_console.tests-empty"


@pytest.fixture
def loader(social_driver) -> PluginLoader:
    plugins = PluginLoader(DriverPlugin, EMPTY_GROUP)
    plugins.register("memory", social_driver)
    return plugins


@pytest.fixture
def run(loader, printer, terminal):
    def _run(*argv):
        return main(list(argv), loader=loader, printer=printer, terminal=terminal)
    return _run


# ═════════════════════════════════════════════════════════════════
#  ARGUMENTS
# ═════════════════════════════════════════════════════════════════

class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.server is None
        assert args.cluster is None
        assert args.script is None
        assert args.commands is None
        assert args.driver is None
        assert args.log_level == "WARNING"

    def test_commands_extend(self):
        args = build_parser().parse_args(["--command", "a", "b", "--command", "c"])
        assert args.commands == ["a", "b", "c"]

    @pytest.mark.parametrize("argv", [
        ["--server", "a:1", "--cluster", "b:1"],
        ["--script", "x", "--command", "database list"],
        ["--log-level", "LOUD"],
    ])
    def test_usage_errors(self, argv):
        with pytest.raises(SystemExit) as info:
            build_parser().parse_args(argv)
        assert info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as info:
            build_parser().parse_args(["--version"])
        assert info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ═════════════════════════════════════════════════════════════════
#  DRIVER SELECTION
# ═════════════════════════════════════════════════════════════════

class TestSelectDriver:

    def test_only_driver_is_default(self, loader, social_driver):
        assert select_driver(loader, None) is social_driver

    def test_named(self, loader, social_driver):
        loader.register("other", MemoryDriverPlugin())
        assert select_driver(loader, "memory") is social_driver

    def test_unknown_name(self, loader):
        with pytest.raises(DriverNotFoundError, match="Unknown driver 'nope'"):
            select_driver(loader, "nope")

    def test_none_installed(self):
        with pytest.raises(DriverNotFoundError, match="No driver plugin"):
            select_driver(PluginLoader(DriverPlugin, EMPTY_GROUP), None)

    def test_ambiguous(self, loader):
        loader.register("other", MemoryDriverPlugin())
        with pytest.raises(DriverNotFoundError, match="--driver"):
            select_driver(loader, None)


# ═════════════════════════════════════════════════════════════════
#  RUN MODES
# ═════════════════════════════════════════════════════════════════

class TestMain:

    def test_commands(self, run, out):
        assert run("--command", "database list") == 0
        assert "social" in out.getvalue().splitlines()

    def test_commands_failure(self, run, err):
        assert run("--command", "database create social") == 1
        assert "already exists" in err.getvalue()

    def test_script(self, run, tmp_path):
        script = tmp_path / "setup.gcs"
        script.write_text("database create foo\n", encoding="utf-8")
        assert run("--script", str(script)) == 0

    def test_missing_script(self, run, tmp_path):
        assert run("--script", str(tmp_path / "missing.gcs")) == 1

    def test_interactive_prints_banner_once(self, run, terminal, out):
        terminal.lines.append("exit")
        assert run() == 0
        assert out.getvalue().count(COPYRIGHT.strip()) == 1

    def test_no_banner_for_commands(self, run, out):
        run("--command", "database list")
        assert COPYRIGHT.strip() not in out.getvalue()

    def test_server_address(self, run, out):
        assert run("--server", "elsewhere:1729", "--command", "database list") == 0
        assert "No databases are present on the server." in out.getvalue()

    def test_cluster(self, run, out):
        assert run("--cluster", "a:1729, b:1729",
                   "--command", "database create foo", "database replicas foo") == 0
        lines = [line.split() for line in out.getvalue().splitlines() if line.startswith(("a:", "b:"))]
        assert [line[:2] for line in lines] == [["a:1729", "primary"], ["b:1729", "secondary"]]

    def test_connection_failure(self, run, err):
        assert run("--cluster", ",", "--command", "database list") == 1
        assert "Invalid server address" in err.getvalue()

    def test_driver_not_found(self, run, err):
        assert run("--driver", "nope", "--command", "database list") == 1
        assert "Unknown driver 'nope'" in err.getvalue()

    def test_no_drivers(self, printer, terminal, err):
        empty = PluginLoader(DriverPlugin, EMPTY_GROUP)
        assert main(["--command", "database list"], loader=empty, printer=printer, terminal=terminal) == 1
        assert "No driver plugin is installed." in err.getvalue()
