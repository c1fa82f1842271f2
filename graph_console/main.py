"""
    Process entry point — command-line flags, driver selection, run mode.

    Exactly one run mode is active per process:
        • interactive   (no ``--script`` and no ``--command``)
        • script        (``--script PATH``)
        • commands      (``--command CMD [CMD ...]``)

    Exit status is 1 when the script or command list reports a failure
    or the console cannot connect; argparse usage errors exit with 2.
"""
import argparse
import logging
import sys
from typing import List, Optional

from graph_console_api.client import Client
from graph_console_api.errors import ClientError
from graph_console_api.plugins.base import DriverPlugin

from . import __version__
from .config import ConsoleConfig
from .core import COPYRIGHT, GraphConsole
from .plugin_loader import PluginLoader, create_driver_loader
from .printer import Printer
from .terminal import Terminal

logger = logging.getLogger(__name__)

MINIMUM_PYTHON = (3, 9)


class DriverNotFoundError(Exception):
    """Raised when no driver plugin matches the requested name."""
    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graph-console",
        description="Interactive console for a graph database server.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--server", metavar="ADDRESS",
                        help="Server address to which the console will connect")
    target.add_argument("--cluster", metavar="ADDRESSES",
                        help="Comma-separated cluster addresses to which the console will connect")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--script", metavar="PATH",
                      help="Script with commands to run in the console, without interactive mode")
    mode.add_argument("--command", dest="commands", metavar="CMD", nargs="+", action="extend",
                      help="Commands to run in the console, without interactive mode")
    parser.add_argument("--driver", metavar="NAME",
                        help="Driver plugin used to reach the server")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging threshold for diagnostic output on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def select_driver(loader: PluginLoader[DriverPlugin], name: Optional[str]) -> DriverPlugin:
    """
    Pick the named driver, or the only installed one when no name is given.

    Raises:
        DriverNotFoundError: If the name is unknown, nothing is installed,
            or several drivers are installed and none was named.
    """
    names = loader.get_names()
    if name is not None:
        driver = loader.get(name)
        if driver is None:
            raise DriverNotFoundError(
                f"Unknown driver '{name}'. Installed drivers: {', '.join(names) or 'none'}")
        return driver
    if len(names) == 1:
        return loader.get(names[0])
    if not names:
        raise DriverNotFoundError("No driver plugin is installed.")
    raise DriverNotFoundError(f"Several drivers are installed ({', '.join(names)}); choose one with --driver.")


def connect(driver: DriverPlugin, args: argparse.Namespace, config: ConsoleConfig) -> Client:
    if args.cluster is not None:
        addresses = [address.strip() for address in args.cluster.split(",") if address.strip()]
        logger.info("Connecting to cluster %s with %s", addresses, driver.get_plugin_name())
        return driver.connect_cluster(addresses)
    address = args.server if args.server is not None else config.default_address
    logger.info("Connecting to %s with %s", address, driver.get_plugin_name())
    return driver.connect(address)


def main(argv: Optional[List[str]] = None,
         loader: Optional[PluginLoader[DriverPlugin]] = None,
         printer: Optional[Printer] = None,
         terminal: Optional[Terminal] = None) -> int:
    printer = printer or Printer()
    if sys.version_info < MINIMUM_PYTHON:
        printer.error("Graph Console requires Python %d.%d or newer." % MINIMUM_PYTHON)
        return 1

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = ConsoleConfig()

    if loader is None:
        loader = create_driver_loader()
    try:
        driver = select_driver(loader, args.driver or config.default_driver)
    except DriverNotFoundError as e:
        printer.error(str(e))
        return 1

    interactive = args.script is None and args.commands is None
    if interactive:
        printer.info(COPYRIGHT)
    console = GraphConsole(printer, terminal or Terminal(), config)
    try:
        client = connect(driver, args, config)
    except ClientError as e:
        printer.error(str(e))
        console.shutdown()
        return 1

    try:
        with client:
            if args.script is not None:
                success = console.run_script(client, args.script)
            elif args.commands is not None:
                success = console.run_commands(client, args.commands)
            else:
                console.run_interactive(client, banner=False)
                success = True
    except ClientError as e:
        printer.error(str(e))
        success = False
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
