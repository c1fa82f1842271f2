"""
    Answer types produced by query execution, plus cluster replica info.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Concept:
    """
    A thing or type returned by the server.

    Attributes:
        type_label: Label of the concept's type (or of the type itself).
        iid:        Server-assigned identifier; ``None`` for types.
        value:      Attribute value; ``None`` for entities and relations.
    """
    type_label: str
    iid: Optional[str] = None
    value: Any = None

    def is_type(self) -> bool:
        return self.iid is None and self.value is None

    def is_attribute(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ConceptMap:
    """One answer row: variable name (without ``$``) to concept."""
    concepts: Dict[str, Concept] = field(default_factory=dict)

    def get(self, variable: str) -> Optional[Concept]:
        return self.concepts.get(variable)

    def variables(self) -> List[str]:
        return list(self.concepts.keys())


@dataclass(frozen=True)
class ConceptMapGroup:
    owner: Concept
    concept_maps: List[ConceptMap] = field(default_factory=list)


@dataclass(frozen=True)
class Numeric:
    """Aggregate result; ``value`` is ``None`` when the aggregate is undefined."""
    value: Optional[Union[int, float]] = None

    def is_nan(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class NumericGroup:
    owner: Concept
    numeric: Numeric


@dataclass(frozen=True)
class Replica:
    """
    One node serving a copy of a database in a cluster.

    Attributes:
        address:      Address of the node hosting the replica.
        database:     Name of the replicated database.
        is_primary:   Whether this replica currently accepts writes.
        is_preferred: Whether the client prefers reading from this replica.
        term:         Raft term the replica is in.
    """
    address: str
    database: str
    is_primary: bool = False
    is_preferred: bool = False
    term: int = 0
