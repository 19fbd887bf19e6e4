"""
Data integrity rule set for database code.

codeintel/src/codeintel/dimensions/data_integrity.py
"""

import re

from .base import PatternRule, all_of, contains, contains_any, lacks, matches, tech

__all__ = ["DATABASE_DATA_INTEGRITY_RULES"]

DATABASE_DATA_INTEGRITY_RULES = [
    PatternRule("DB-INT-PRIMARY-KEY", contains("PRIMARY KEY"), message="Primary key constraint", delta=5),
    PatternRule(
        "DB-INT-MISSING-PRIMARY-KEY",
        all_of(contains("CREATE TABLE"), lacks("PRIMARY KEY")),
        message="Missing primary key constraint",
        bucket="validations",
        suggestion="Add a PRIMARY KEY to every table",
        delta=-15,
    ),
    PatternRule(
        "DB-INT-FOREIGN-KEY",
        matches(r"FOREIGN KEY|\bREFERENCES\b"),
        message="Foreign key constraints",
        delta=10,
    ),
    PatternRule(
        "DB-INT-RELATIONSHIPS",
        matches(r"FOREIGN KEY|\bREFERENCES\b"),
        message="Referential integrity between tables",
        bucket="relationships",
    ),
    PatternRule(
        "DB-INT-UNREFERENCED-IDS",
        all_of(contains("CREATE TABLE"), matches(r"\b\w+_id\s+(?:INT|INTEGER|BIGINT|UUID)", re.IGNORECASE), lacks("REFERENCES", "FOREIGN KEY")),
        message="*_id columns without foreign keys",
        bucket="relationships",
        suggestion="Declare FOREIGN KEY constraints for reference columns",
        delta=-8,
    ),
    PatternRule("DB-INT-CASCADE", matches(r"ON\s+(?:DELETE|UPDATE)\s+(?:CASCADE|SET NULL|RESTRICT)", re.IGNORECASE), message="Cascade operations defined", bucket="relationships", delta=5),
    PatternRule("DB-INT-NOT-NULL", contains("NOT NULL"), message="NOT NULL constraints", delta=3),
    PatternRule("DB-INT-UNIQUE", contains("UNIQUE"), message="Unique constraints", delta=5),
    PatternRule("DB-INT-CHECK", matches(r"\bCHECK\s*\("), message="Check constraint validation", bucket="validations", delta=5),
    PatternRule(
        "DB-INT-TRANSACTIONS",
        contains_any("TRANSACTION", "BEGIN", "startSession", "MULTI"),
        message="Transactional writes",
        bucket="validations",
        delta=5,
    ),
    PatternRule("DB-INT-TRIGGERS", contains("TRIGGER"), message="Triggers enforce derived data", bucket="validations", delta=3),
    PatternRule(
        "DB-INT-MONGO-SCHEMA",
        all_of(tech("mongo"), contains("$jsonSchema")),
        message="Schema validation (MongoDB)",
        bucket="validations",
        delta=8,
    ),
    PatternRule(
        "DB-INT-MONGO-NO-SCHEMA",
        all_of(tech("mongo"), contains_any("insertOne", "insertMany", "createCollection"), lacks("$jsonSchema", "validator")),
        suggestion="Add a $jsonSchema validator to collections",
        delta=-5,
    ),
    PatternRule(
        "DB-INT-FLOAT-MONEY",
        matches(r"(?i)\b(?:price|amount|balance|total)\w*\s+(?:FLOAT|REAL|DOUBLE)\b"),
        message="Monetary values stored as floating point",
        bucket="validations",
        suggestion="Use DECIMAL/NUMERIC for monetary values",
        delta=-8,
    ),
]
