"""
Query optimization rule set for database code.

Index-related signals go to `indexUsage`, problematic query shapes to
`queryPatterns`, advice to `optimizations`.

codeintel/src/codeintel/dimensions/query_optimization.py
"""

import re
from typing import Iterator

from ..types import Finding
from .base import (
    BaseRule,
    PatternRule,
    all_of,
    contains,
    contains_any,
    lacks,
    matches,
    tech,
)

__all__ = ["DATABASE_QUERY_OPTIMIZATION_RULES", "JoinCountRule"]


class JoinCountRule(BaseRule):
    """Flags queries that join many tables."""

    rule_id = "DB-QOPT-MANY-JOINS"

    def __init__(self, limit: int = 3):
        self.limit = limit

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        joins = len(re.findall(r"\bJOIN\b", code, re.IGNORECASE))
        if joins > self.limit:
            yield self.create_finding(
                -8,
                message=f"Complex query with {joins} joins may be slow",
                suggestion="Consider denormalization or query optimization for complex joins",
            )


class BatchInsertRule(BaseRule):
    """Suggests batching when many single-row inserts appear."""

    rule_id = "DB-QOPT-SINGLE-ROW-INSERTS"

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        if len(re.findall(r"\bINSERT\s+INTO\b", code, re.IGNORECASE)) > 3:
            yield self.create_finding(
                -5, suggestion="Consider batch INSERT operations for better performance"
            )


_INDEX = "indexUsage"

DATABASE_QUERY_OPTIMIZATION_RULES = [
    PatternRule(
        "DB-QOPT-CREATE-INDEX",
        matches(r"CREATE\s+(?:UNIQUE\s+)?INDEX", re.IGNORECASE),
        message="Indexes defined",
        bucket=_INDEX,
        delta=12,
    ),
    PatternRule(
        "DB-QOPT-CONCURRENT-INDEX",
        contains("CONCURRENTLY"),
        message="Concurrent index builds avoid write locks",
        bucket=_INDEX,
        delta=8,
    ),
    PatternRule(
        "DB-QOPT-COMPOSITE-INDEX",
        matches(r"CREATE\s+(?:UNIQUE\s+)?INDEX[^;(]{0,300}\([^),;]{0,300},[^);]{0,300}\)", re.IGNORECASE),
        message="Composite indexes for multi-column filters",
        bucket=_INDEX,
        delta=6,
    ),
    PatternRule(
        "DB-QOPT-PARTIAL-INDEX",
        matches(r"CREATE\s+(?:UNIQUE\s+)?INDEX[^;]{0,500}\)\s*WHERE\b", re.IGNORECASE),
        message="Partial indexes limit index size",
        bucket=_INDEX,
        delta=5,
    ),
    PatternRule(
        "DB-QOPT-MISSING-INDEX",
        all_of(contains("WHERE"), lacks("INDEX", "createIndex")),
        message="Filtered columns are not indexed",
        bucket=_INDEX,
        suggestion="Create indexes on columns used in WHERE clauses",
        delta=-10,
    ),
    PatternRule(
        "DB-QOPT-EXPLAIN",
        contains_any("EXPLAIN", ".explain("),
        suggestion="Keep reviewing query plans with EXPLAIN",
        delta=8,
    ),
    PatternRule(
        "DB-QOPT-SELECT-STAR",
        contains("SELECT *"),
        message="SELECT * prevents covering index use",
        delta=-8,
    ),
    PatternRule(
        "DB-QOPT-LEADING-WILDCARD",
        contains("LIKE '%"),
        message="Leading wildcard LIKE patterns cannot use indexes",
        suggestion="Avoid leading wildcards or use full-text search",
        delta=-10,
    ),
    PatternRule(
        "DB-QOPT-IN-SUBQUERY",
        matches(r"(?<!NOT )\bIN\s*\(\s*SELECT", re.IGNORECASE),
        message="IN subqueries can be inefficient",
        suggestion="Consider using EXISTS or JOIN instead of IN subqueries",
        delta=-10,
    ),
    PatternRule(
        "DB-QOPT-FUNCTION-IN-WHERE",
        matches(r"WHERE\s+\w+\(", re.IGNORECASE),
        message="Functions in WHERE clauses prevent index usage",
        suggestion="Avoid functions in WHERE clauses when possible",
        delta=-12,
    ),
    PatternRule(
        "DB-QOPT-OR-CONDITIONS",
        all_of(contains("WHERE"), matches(r"\bOR\b")),
        message="OR conditions can prevent index usage",
        suggestion="Rewrite OR conditions as UNION or IN lists",
        delta=-5,
    ),
    PatternRule(
        "DB-QOPT-NEGATED-COMPARISON",
        all_of(contains("WHERE"), contains_any("!=", "<>")),
        message="Negated comparisons rarely use indexes",
        delta=-3,
    ),
    PatternRule(
        "DB-QOPT-CARTESIAN-JOIN",
        all_of(matches(r"\bJOIN\b"), lacks(" ON ", " USING", "CROSS JOIN")),
        message="Joins without proper ON conditions (cartesian product)",
        suggestion="Always specify proper join conditions",
        delta=-25,
    ),
    JoinCountRule(),
    BatchInsertRule(),
    PatternRule(
        "DB-QOPT-CTE",
        matches(r"\bWITH\s+(?:RECURSIVE\s+)?\w+\s+AS\s*\(", re.IGNORECASE),
        message="Common table expressions structure complex queries",
        delta=5,
    ),
    PatternRule(
        "DB-QOPT-PARTITIONING",
        matches(r"PARTITION\s+BY", re.IGNORECASE),
        message="Table partitioning",
        delta=12,
    ),
    PatternRule(
        "DB-QOPT-MATERIALIZED-VIEW",
        contains("MATERIALIZED VIEW"),
        message="Materialized views cache expensive aggregations",
        delta=10,
    ),
    PatternRule(
        "DB-QOPT-UNFINISHED-TRANSACTION",
        all_of(contains_any("BEGIN", "START TRANSACTION"), lacks("COMMIT", "ROLLBACK", "END;")),
        message="Incomplete transaction management",
        suggestion="Ensure all transactions are properly committed or rolled back",
        delta=-10,
    ),
    PatternRule(
        "DB-QOPT-POSTGRES-MAINTENANCE",
        all_of(tech("postgres"), contains("CREATE TABLE"), lacks("VACUUM", "ANALYZE")),
        suggestion="Regular VACUUM and ANALYZE operations improve PostgreSQL performance",
    ),
    PatternRule("DB-QOPT-POSTGRES-JSONB", all_of(tech("postgres"), contains("JSONB"), contains("GIN")), delta=5),
    PatternRule(
        "DB-QOPT-MYSQL-MYISAM",
        all_of(tech("mysql", "maria"), contains("MyISAM")),
        message="MyISAM storage engine lacks transaction support and row-level locking",
        suggestion="Consider using InnoDB for better performance and ACID compliance",
        delta=-10,
    ),
    PatternRule("DB-QOPT-MYSQL-INDEX-HINTS", all_of(tech("mysql", "maria"), contains_any("FORCE INDEX", "USE INDEX")), delta=3),
    PatternRule(
        "DB-QOPT-MONGO-CREATE-INDEX",
        all_of(tech("mongo"), contains("createIndex")),
        message="Collection indexes defined",
        bucket=_INDEX,
        delta=12,
    ),
    PatternRule(
        "DB-QOPT-MONGO-LOOKUP",
        all_of(tech("mongo"), contains("$lookup"), lacks("createIndex")),
        message="$lookup operations without proper indexing can be slow",
        suggestion="Create indexes on lookup fields",
        delta=-10,
    ),
    PatternRule(
        "DB-QOPT-MONGO-MATCH-FIRST",
        all_of(tech("mongo"), contains("aggregate"), contains("$match")),
        suggestion="Place $match stages early in aggregation pipeline",
    ),
    PatternRule("DB-QOPT-REDIS-PIPELINE", all_of(tech("redis"), contains_any("PIPELINE", "MULTI", "pipeline(")), delta=8),
    PatternRule(
        "DB-QOPT-REDIS-EXPIRY",
        all_of(tech("redis"), contains_any("EXPIRE", "TTL", " EX ")),
        message="Key expiration bounds memory usage",
        delta=5,
    ),
]
