"""
Graph Console API — client contracts, answer types and query statements.
"""
from .errors import ClientError, ClientConnectionError, QuerySyntaxError
from .options import TransactionOptions, ClusterOptions
from .answers import Concept, ConceptMap, ConceptMapGroup, Numeric, NumericGroup, Replica
from .client import (
    SessionType,
    TransactionType,
    Client,
    DatabaseManager,
    Database,
    Session,
    Transaction,
    QueryManager,
)
from .query import (
    QueryStatement,
    DefineQuery,
    UndefineQuery,
    InsertQuery,
    DeleteQuery,
    MatchQuery,
    MatchAggregateQuery,
    MatchGroupQuery,
    MatchGroupAggregateQuery,
    ComputeQuery,
    parse_queries,
)
from .plugins.base import DriverPlugin

__all__ = [
    'ClientError',
    'ClientConnectionError',
    'QuerySyntaxError',
    'TransactionOptions',
    'ClusterOptions',
    'Concept',
    'ConceptMap',
    'ConceptMapGroup',
    'Numeric',
    'NumericGroup',
    'Replica',
    'SessionType',
    'TransactionType',
    'Client',
    'DatabaseManager',
    'Database',
    'Session',
    'Transaction',
    'QueryManager',
    'QueryStatement',
    'DefineQuery',
    'UndefineQuery',
    'InsertQuery',
    'DeleteQuery',
    'MatchQuery',
    'MatchAggregateQuery',
    'MatchGroupQuery',
    'MatchGroupAggregateQuery',
    'ComputeQuery',
    'parse_queries',
    'DriverPlugin',
]
