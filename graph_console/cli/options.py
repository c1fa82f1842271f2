"""
    Transaction options — the ``--name value`` tail of a ``transaction`` command.

    Two constant registries are built once at import time:

        CORE_OPTIONS     options every server understands
        CLUSTER_OPTIONS  CORE_OPTIONS re-targeted at ``ClusterOptions``,
                         plus the cluster-only options

    Each ``OptionSpec`` carries a pure builder ``(options, value) -> options``;
    parsing folds the ``(--name, value)`` pairs through the matching
    builders from left to right, so a repeated option keeps its last value.
"""
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, List, Sequence, Tuple

from graph_console_api.options import ClusterOptions, TransactionOptions

from ..exceptions import InvalidOptionError
from .commands import TRANSACTION_OPTIONS_TOKEN

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1


class ArgKind(Enum):
    """Type of an option's argument, with its help-menu rendering."""
    BOOLEAN = "true|false"
    INTEGER = "1..[max int]"

    @property
    def readable_string(self) -> str:
        return self.value

    def parse(self, raw: str) -> Any:
        """
        Convert the raw token.

        BOOLEAN is lenient: anything other than ``true`` (any case) is
        ``False``.  INTEGER accepts a signed 32-bit decimal.

        Raises:
            ValueError: If an INTEGER argument is not a number or out of range.
        """
        if self is ArgKind.BOOLEAN:
            return raw.lower() == "true"
        if not _INTEGER_PATTERN.fullmatch(raw):
            raise ValueError(f"'{raw}' is not an integer")
        value = int(raw)
        if not _INT_MIN <= value <= _INT_MAX:
            raise ValueError(f"'{raw}' is out of range")
        return value


Builder = Callable[[TransactionOptions, Any], TransactionOptions]


@dataclass(frozen=True)
class OptionSpec:
    name: str
    arg: ArgKind
    description: str
    builder: Builder

    def build(self, options: TransactionOptions, raw: str) -> TransactionOptions:
        try:
            value = self.arg.parse(raw)
        except ValueError as e:
            raise InvalidOptionError(self.name, f"Invalid value for option '--{self.name}': {e}")
        return self.builder(options, value)

    def as_cluster_option(self) -> 'OptionSpec':
        """The same option, with its result promoted to ``ClusterOptions``."""
        builder = self.builder

        def cluster_builder(options: TransactionOptions, value: Any) -> TransactionOptions:
            return ClusterOptions.from_options(builder(options, value))

        return OptionSpec(self.name, self.arg, self.description, cluster_builder)


CORE_OPTIONS: Tuple[OptionSpec, ...] = (
    OptionSpec("infer", ArgKind.BOOLEAN, "Enable or disable inference",
               lambda opt, arg: replace(opt, infer=arg)),
    OptionSpec("trace-inference", ArgKind.BOOLEAN, "Enable or disable inference tracing",
               lambda opt, arg: replace(opt, trace_inference=arg)),
    OptionSpec("explain", ArgKind.BOOLEAN, "Enable or disable inference explanations",
               lambda opt, arg: replace(opt, explain=arg)),
    OptionSpec("parallel", ArgKind.BOOLEAN, "Enable or disable parallel query execution",
               lambda opt, arg: replace(opt, parallel=arg)),
    OptionSpec("batch-size", ArgKind.INTEGER, "Set RPC answer batch size",
               lambda opt, arg: replace(opt, prefetch_size=arg)),
    OptionSpec("prefetch", ArgKind.BOOLEAN, "Enable or disable RPC answer prefetch",
               lambda opt, arg: replace(opt, prefetch=arg)),
    OptionSpec("session-idle-timeout", ArgKind.INTEGER, "Kill idle session timeout (ms)",
               lambda opt, arg: replace(opt, session_idle_timeout_millis=arg)),
    OptionSpec("schema-lock-acquire-timeout", ArgKind.INTEGER, "Acquire exclusive schema session timeout (ms)",
               lambda opt, arg: replace(opt, schema_lock_acquire_timeout_millis=arg)),
)

CLUSTER_ONLY_OPTIONS: Tuple[OptionSpec, ...] = (
    OptionSpec("read-any-replica", ArgKind.BOOLEAN, "Allow (possibly stale) reads from any replica",
               lambda opt, arg: replace(ClusterOptions.from_options(opt), read_any_replica=arg)),
)

CLUSTER_OPTIONS: Tuple[OptionSpec, ...] = (
    tuple(option.as_cluster_option() for option in CORE_OPTIONS) + CLUSTER_ONLY_OPTIONS
)


def registry(is_cluster: bool) -> Tuple[OptionSpec, ...]:
    return CLUSTER_OPTIONS if is_cluster else CORE_OPTIONS


def find_option(name: str, is_cluster: bool) -> OptionSpec:
    """
    Raises:
        InvalidOptionError: If no option called ``name`` is registered.
    """
    for option in registry(is_cluster):
        if option.name == name:
            return option
    raise InvalidOptionError(name, f"Unrecognized option '--{name}'")


def default_options(is_cluster: bool) -> TransactionOptions:
    return ClusterOptions() if is_cluster else TransactionOptions()


def parse_options(tokens: Sequence[str], is_cluster: bool) -> TransactionOptions:
    """
    Fold ``--name value`` pairs into an options object.

    Example:
        >>> parse_options(["--batch-size", "10", "--batch-size", "20"], False).prefetch_size
        20

    Raises:
        InvalidOptionError: On a token without the ``--`` prefix, a name
            with no value, an unknown name, or an unparseable value.
    """
    options = default_options(is_cluster)
    for i in range(0, len(tokens), 2):
        token = tokens[i]
        if not token.startswith("--") or len(token) == 2:
            raise InvalidOptionError(token, f"Expected an option of the form '--name', got '{token}'")
        name = token[2:]
        if i + 1 >= len(tokens):
            raise InvalidOptionError(name, f"Missing value for option '--{name}'")
        options = find_option(name, is_cluster).build(options, tokens[i + 1])
    return options


def help_menu(is_cluster: bool) -> List[Tuple[str, str]]:
    """Help-menu rows for the options of the active registry."""
    menu = [(TRANSACTION_OPTIONS_TOKEN, "Transaction options")]
    for option in registry(is_cluster):
        menu.append((f"--{option.name} {option.arg.readable_string}", option.description))
    return menu
