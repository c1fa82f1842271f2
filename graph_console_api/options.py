"""
    Transaction options — the configuration object passed to
    ``Client.session()`` and ``Session.transaction()``.

    Every field is optional: ``None`` means "use the server default".
    Instances are immutable; builders return modified copies through
    ``dataclasses.replace``.
"""
from dataclasses import dataclass, fields
from typing import Optional


@dataclass(frozen=True)
class TransactionOptions:
    """
    Options understood by a single-node server.

    Attributes:
        infer:                              Enable rule inference.
        trace_inference:                    Record inference traces.
        explain:                            Collect inference explanations.
        parallel:                           Allow parallel query execution.
        prefetch_size:                      RPC answer batch size.
        prefetch:                           Prefetch RPC answers.
        session_idle_timeout_millis:        Kill idle sessions after this long.
        schema_lock_acquire_timeout_millis: Wait this long for the schema lock.
    """
    infer: Optional[bool] = None
    trace_inference: Optional[bool] = None
    explain: Optional[bool] = None
    parallel: Optional[bool] = None
    prefetch_size: Optional[int] = None
    prefetch: Optional[bool] = None
    session_idle_timeout_millis: Optional[int] = None
    schema_lock_acquire_timeout_millis: Optional[int] = None

    def is_cluster(self) -> bool:
        return False


@dataclass(frozen=True)
class ClusterOptions(TransactionOptions):
    """Options understood by a cluster; adds replica selection."""
    read_any_replica: Optional[bool] = None

    def is_cluster(self) -> bool:
        return True

    @classmethod
    def from_options(cls, options: TransactionOptions) -> 'ClusterOptions':
        """Promote plain options to cluster options, keeping every set field."""
        if isinstance(options, ClusterOptions):
            return options
        values = {f.name: getattr(options, f.name) for f in fields(TransactionOptions)}
        return cls(**values)
