"""
    Console configuration — connection defaults, history files, worker tuning.

    Provides a typed configuration object that controls where the
    console connects by default, where it keeps line-editing history,
    and how the foreground waits on the answer-printing worker.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_ADDRESS = "localhost:1729"


def _home_file(name: str) -> Path:
    return Path.home() / name


@dataclass
class ConsoleConfig:
    """
    Top-level configuration for the Graph Console.

    Attributes:
        default_address:          Server used when neither ``--server`` nor
                                  ``--cluster`` is given.
        command_history_file:     History of the top-level REPL.
        transaction_history_file: History of the transaction REPL.
        default_driver:           Entry-point name of the driver plugin.
                                  ``None`` means "the only one installed".
        poll_interval:            Seconds between checks while waiting on
                                  the answer-printing worker.
    """
    default_address: str = DEFAULT_ADDRESS
    command_history_file: Path = field(
        default_factory=lambda: _home_file(".graph-console-command-history"))
    transaction_history_file: Path = field(
        default_factory=lambda: _home_file(".graph-console-transaction-history"))
    default_driver: Optional[str] = None
    poll_interval: float = 0.1
