"""
Graph Console — core package.

Public API:
    GraphConsole              – runs commands against a connected client
    ConsoleConfig             – connection defaults, history files
    Printer                   – user-facing output
    Terminal                  – line editing, history, interrupt ownership
    CancellableResultPrinter  – interruptible answer streaming
    PluginLoader              – generic driver plugin discovery
"""
__version__ = "1.0.0"

from .core import GraphConsole
from .config import ConsoleConfig
from .printer import Printer
from .terminal import Terminal, LineReader
from .result_printer import CancellableResultPrinter, PrintOutcome, Completed, Cancelled
from .plugin_loader import PluginLoader, create_driver_loader

__all__ = [
    'GraphConsole',
    'ConsoleConfig',
    'Printer',
    'Terminal',
    'LineReader',
    'CancellableResultPrinter',
    'PrintOutcome',
    'Completed',
    'Cancelled',
    'PluginLoader',
    'create_driver_loader',
]
