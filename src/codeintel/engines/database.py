"""
Database category engine: SQL and NoSQL schema, query and data work.

codeintel/src/codeintel/engines/database.py
"""

import logging
import re
from typing import Sequence

from ..comments import HASH, SLASH, SQL, CommentStyle, append_comment_block
from ..dimensions import (
    DATABASE_DATA_INTEGRITY_RULES,
    DATABASE_MAINTAINABILITY_RULES,
    DATABASE_PERFORMANCE_RULES,
    DATABASE_QUALITY_RULES,
    DATABASE_QUERY_OPTIMIZATION_RULES,
    DATABASE_SECURITY_RULES,
    maintainability_details,
)
from ..templates import database as templates
from ..types import DATA_INTEGRITY, MAINTAINABILITY, PERFORMANCE, QUALITY, QUERY_OPTIMIZATION, SECURITY
from .base import WARNING, AnalyzerSpec, BaseCategoryEngine, PostProcessor, ValidationCheck
from .dispatch import TechnologyDispatch, TechnologyRoute

logger = logging.getLogger(__name__)

__all__ = ["DatabaseEngine"]

_CREATE_TABLE = re.compile(r"\bCREATE\s+(?:TEMPORARY\s+)?TABLE\b[^;]*", re.IGNORECASE)
_ALTER_TABLE = re.compile(r"\bALTER\s+TABLE\b", re.IGNORECASE)
_PRIMARY_KEY = re.compile(r"\bPRIMARY\s+KEY\b", re.IGNORECASE)
_LEADING_COMMENTS = re.compile(r"^(?:\s*--[^\n]*\n|\s*/\*.*?\*/)*\s*", re.DOTALL)
_UNBOUNDED_WRITE = re.compile(r"^(?:DELETE\s+FROM|UPDATE)\s+\S+", re.IGNORECASE)
_SQL_COMMENTS = re.compile(r"--[^\n]*|/\*.*?(?:\*/|\Z)", re.DOTALL)


def _has_create_table(code: str) -> bool:
    return _CREATE_TABLE.search(code) is not None


def table_without_primary_key(code: str, technology: str) -> bool:
    """True when some CREATE TABLE statement declares no primary key. Comments are ignored."""
    code = _SQL_COMMENTS.sub("", code)
    for statement in code.split(";"):
        alter = _ALTER_TABLE.search(statement)
        if alter and _PRIMARY_KEY.search(statement, alter.end()):
            return False
    return any(not _PRIMARY_KEY.search(statement) for statement in _CREATE_TABLE.findall(code))


def write_without_where(code: str, technology: str) -> bool:
    """True when an UPDATE or DELETE statement has no WHERE clause."""
    for statement in code.split(";"):
        statement = _LEADING_COMMENTS.sub("", statement, count=1)
        if _UNBOUNDED_WRITE.match(statement) and not re.search(r"\bWHERE\b", statement, re.IGNORECASE):
            return True
    return False


def _is_sql(code: str, style: CommentStyle) -> bool:
    return style is SQL or _has_create_table(code) or "SELECT" in code


class DatabaseEngine(BaseCategoryEngine):
    """Schema design, query optimization and data integrity for data stores."""

    category = "database"
    engine_name = "DatabaseEngine"
    default_technology = "PostgreSQL"

    best_practices = (
        "Use appropriate data types for optimal storage",
        "Implement proper indexing strategy",
        "Use primary key constraints for unique identification",
        "Use foreign key constraints for referential integrity",
        "Normalize data to reduce redundancy",
        "Use transactions for data consistency",
        "Implement proper backup and recovery procedures",
        "Use parameterized queries to prevent SQL injection",
        "Monitor query performance regularly",
        "Implement proper access controls and permissions",
        "Use connection pooling for better performance",
    )
    anti_patterns = (
        "Using SELECT * in production queries",
        "Missing indexes on frequently queried columns",
        "Not using foreign key constraints",
        "Storing large BLOBs in the database",
        "Using string concatenation for SQL queries",
        "Not backing up data regularly",
        "Using weak passwords for database users",
        "Granting excessive permissions to users",
        "Not monitoring database performance",
        "Using inefficient query patterns (N+1 queries)",
    )
    quality_checklist = (
        "Schema changes ship as versioned, reversible migrations",
        "Backups and point-in-time recovery are configured and tested",
        "Slow query logging is enabled and reviewed",
        "Each application role holds only the privileges it needs",
    )

    def analyzer_specs(self) -> Sequence[AnalyzerSpec]:
        return (
            AnalyzerSpec(QUALITY, DATABASE_QUALITY_RULES),
            AnalyzerSpec(MAINTAINABILITY, DATABASE_MAINTAINABILITY_RULES, maintainability_details),
            AnalyzerSpec(PERFORMANCE, DATABASE_PERFORMANCE_RULES),
            AnalyzerSpec(SECURITY, DATABASE_SECURITY_RULES),
            AnalyzerSpec(QUERY_OPTIMIZATION, DATABASE_QUERY_OPTIMIZATION_RULES),
            AnalyzerSpec(DATA_INTEGRITY, DATABASE_DATA_INTEGRITY_RULES),
        )

    def build_dispatch(self) -> TechnologyDispatch:
        return TechnologyDispatch(
            [
                TechnologyRoute("postgresql", ("postgresql", "postgres"), templates.postgresql, SQL),
                TechnologyRoute("mysql", ("mysql", "mariadb"), templates.mysql, SQL),
                TechnologyRoute("mongodb", ("mongodb", "mongo"), templates.mongodb, SLASH),
                TechnologyRoute("redis", ("redis",), templates.redis, HASH),
                TechnologyRoute("sqlite", ("sqlite",), templates.sqlite, SQL),
            ],
            fallback=TechnologyRoute("sql", (), templates.generic_sql, SQL),
            table="database",
        )

    def post_processors(self) -> Sequence[PostProcessor]:
        return (
            self.add_optimization_features,
            self.add_integrity_constraints,
            self.add_security_features,
        )

    def validation_checks(self) -> Sequence[ValidationCheck]:
        return (
            ValidationCheck(table_without_primary_key, "Table created without primary key"),
            ValidationCheck(
                lambda code, technology: "SELECT *" in code,
                "SELECT * returns columns the caller may not need",
                WARNING,
            ),
            ValidationCheck(write_without_where, "UPDATE or DELETE without WHERE affects every row", WARNING),
            ValidationCheck(
                lambda code, technology: re.search(r"(?i)password\s*[:=]\s*['\"][^'\"]+['\"]", code) is not None,
                "Hardcoded database credentials",
                WARNING,
            ),
        )

    # Post-processors

    def add_optimization_features(self, code: str, technology: str, style: CommentStyle) -> str:
        """Add planner statistics refresh and optimization notes."""
        notes = []
        if "SELECT *" in code:
            notes.append("Optimization: replace SELECT * with an explicit column list")
        if "postgres" in technology and _has_create_table(code) and "ANALYZE" not in code:
            code = code.rstrip("\n") + "\n\n-- Refresh planner statistics\nANALYZE;\n"
        if ("mysql" in technology or "mariadb" in technology) and _has_create_table(code):
            notes.append("Optimization: run OPTIMIZE TABLE after bulk deletes")
        if "mongo" in technology and ".find(" in code and "createIndex" not in code:
            notes.append("Optimization: create indexes that cover the query filters")
        if "redis" in technology and re.search(r"\bKEYS\s+\*", code):
            notes.append("Optimization: use SCAN instead of KEYS in production")
        if not notes:
            return code
        return append_comment_block(code, notes, style)

    def add_integrity_constraints(self, code: str, technology: str, style: CommentStyle) -> str:
        """Note missing relational constraints without rewriting statements."""
        if not _has_create_table(code):
            return code
        notes = []
        if table_without_primary_key(code, technology):
            notes.append("Integrity: declare a primary key on every table")
        if not re.search(r"\b(?:FOREIGN\s+KEY|REFERENCES)\b", code, re.IGNORECASE):
            notes.append("Integrity: add foreign key constraints for related tables")
        if "NOT NULL" not in code.upper():
            notes.append("Integrity: mark required columns as non-nullable")
        if not notes:
            return code
        return append_comment_block(code, notes, style)

    def add_security_features(self, code: str, technology: str, style: CommentStyle) -> str:
        """Add a least-privilege access note when no access control is declared."""
        if not _is_sql(code, style):
            return code
        if any(marker in code for marker in ("GRANT", "ROLE", "POLICY", "ACL")):
            return code
        return append_comment_block(
            code,
            ["Access control: grant each application role only the privileges it needs"],
            style,
        )
