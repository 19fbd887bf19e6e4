"""
Database artifact generators.

codeintel/src/codeintel/templates/database.py
"""

from ..comments import identifier, js_string, sql_string
from . import TemplateContext, render

__all__ = ["postgresql", "mysql", "mongodb", "redis", "sqlite", "generic_sql"]

_POSTGRESQL = """
CREATE TABLE IF NOT EXISTS __TABLE___owners (
    id BIGSERIAL PRIMARY KEY,
    email VARCHAR(255) NOT NULL UNIQUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS __TABLE__ (
    id BIGSERIAL PRIMARY KEY,
    owner_id BIGINT NOT NULL,
    name VARCHAR(255) NOT NULL,
    description TEXT,
    status VARCHAR(20) NOT NULL DEFAULT 'active',
    metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT __TABLE___status_check CHECK (status IN ('active', 'inactive', 'archived')),
    CONSTRAINT __TABLE___owner_fk FOREIGN KEY (owner_id)
        REFERENCES __TABLE___owners (id) ON DELETE CASCADE
);

COMMENT ON TABLE __TABLE__ IS __FEATURE_SQL__;

-- Indexes for the common access paths
CREATE INDEX IF NOT EXISTS idx___TABLE___owner_status ON __TABLE__ (owner_id, status);
CREATE INDEX IF NOT EXISTS idx___TABLE___active_created ON __TABLE__ (created_at DESC)
    WHERE status = 'active';
CREATE INDEX IF NOT EXISTS idx___TABLE___metadata ON __TABLE__ USING GIN (metadata);

-- Keep updated_at current
CREATE OR REPLACE FUNCTION __TABLE___touch_updated_at() RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = NOW();
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

CREATE TRIGGER __TABLE___updated_at
    BEFORE UPDATE ON __TABLE__
    FOR EACH ROW EXECUTE FUNCTION __TABLE___touch_updated_at();

-- Access control: GRANT SELECT, INSERT, UPDATE ON __TABLE__ TO app_user;

-- Paginated read for one owner
SELECT id, name, status, created_at
FROM __TABLE__
WHERE owner_id = $1 AND status = 'active'
ORDER BY created_at DESC
LIMIT 50;

ANALYZE __TABLE__;
"""

_MYSQL = """
CREATE TABLE IF NOT EXISTS __TABLE___owners (
    id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,
    email VARCHAR(255) NOT NULL UNIQUE,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS __TABLE__ (
    id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,
    owner_id BIGINT UNSIGNED NOT NULL,
    name VARCHAR(255) NOT NULL,
    description TEXT,
    status ENUM('active', 'inactive', 'archived') NOT NULL DEFAULT 'active',
    amount DECIMAL(12, 2) NOT NULL DEFAULT 0,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
    CONSTRAINT __TABLE___amount_check CHECK (amount >= 0),
    CONSTRAINT __TABLE___owner_fk FOREIGN KEY (owner_id)
        REFERENCES __TABLE___owners (id) ON DELETE CASCADE,
    INDEX idx___TABLE___owner_status (owner_id, status),
    INDEX idx___TABLE___created (created_at)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT=__FEATURE_SQL__;

-- Access control: GRANT SELECT, INSERT, UPDATE ON __TABLE__ TO 'app_user'@'%';

-- Paginated read for one owner
SELECT id, name, status, created_at
FROM __TABLE__
WHERE owner_id = ? AND status = 'active'
ORDER BY created_at DESC
LIMIT 50;
"""

_MONGODB = """
db.createCollection("__COLLECTION__", {
  validator: {
    $jsonSchema: {
      bsonType: "object",
      required: ["ownerId", "name", "status", "createdAt"],
      properties: {
        ownerId: { bsonType: "objectId" },
        name: { bsonType: "string", maxLength: 255 },
        description: { bsonType: "string" },
        status: { enum: ["active", "inactive", "archived"] },
        createdAt: { bsonType: "date" },
      },
    },
  },
  validationLevel: "strict",
  comment: __FEATURE_JS__,
});

// Indexes for the common access paths
db.getCollection("__COLLECTION__").createIndex({ ownerId: 1, status: 1 });
db.getCollection("__COLLECTION__").createIndex({ createdAt: -1 }, { partialFilterExpression: { status: "active" } });

// Paginated read for one owner
db.getCollection("__COLLECTION__")
  .find({ ownerId: ownerId, status: "active" }, { name: 1, status: 1, createdAt: 1 })
  .sort({ createdAt: -1 })
  .limit(50);

// Writes spanning documents run in a transaction
const session = db.getMongo().startSession();
session.startTransaction();
try {
  session.getDatabase(db.getName()).getCollection("__COLLECTION__").insertOne({
    ownerId: ownerId,
    name: "example",
    status: "active",
    createdAt: new Date(),
  });
  session.commitTransaction();
} catch (error) {
  session.abortTransaction();
  throw error;
} finally {
  session.endSession();
}
"""

_REDIS = """
# Entity stored as a hash with an expiry
HSET __KEY__:1001 name "example" status "active" created_at "1700000000"
EXPIRE __KEY__:1001 3600

# Secondary indexes
SADD __KEY__:status:active 1001
ZADD __KEY__:by_created 1700000000 1001

# Atomic update of entity and index
MULTI
HSET __KEY__:1001 status "inactive"
SREM __KEY__:status:active 1001
SADD __KEY__:status:inactive 1001
EXEC

# Paginated read by creation time
ZREVRANGE __KEY__:by_created 0 49

# Iterate keys without blocking the server
SCAN 0 MATCH __KEY__:* COUNT 100

# Access control: ACL SETUSER app_user on >change-me ~__KEY__:* +@read +@write
"""

_SQLITE = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS __TABLE___owners (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS __TABLE__ (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'inactive', 'archived')),
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (owner_id) REFERENCES __TABLE___owners (id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx___TABLE___owner_status ON __TABLE__ (owner_id, status);

-- Access control is enforced by file permissions on the database file

SELECT id, name, status, created_at
FROM __TABLE__
WHERE owner_id = ? AND status = 'active'
ORDER BY created_at DESC
LIMIT 50;
"""

_GENERIC_SQL = """
CREATE TABLE __TABLE__ (
    id INTEGER NOT NULL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    description VARCHAR(1000),
    status VARCHAR(20) DEFAULT 'active' NOT NULL,
    parent_id INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,
    CONSTRAINT __TABLE___status_check CHECK (status IN ('active', 'inactive', 'archived')),
    CONSTRAINT __TABLE___parent_fk FOREIGN KEY (parent_id) REFERENCES __TABLE__ (id)
);

CREATE INDEX idx___TABLE___status ON __TABLE__ (status);

-- Access control: GRANT SELECT, INSERT, UPDATE ON __TABLE__ TO app_user;

-- Feature: __FEATURE_LINE__
SELECT id, name, status
FROM __TABLE__
WHERE status = 'active'
ORDER BY created_at DESC
FETCH FIRST 50 ROWS ONLY;
"""


def _lower_camel(text: str) -> str:
    name = identifier(text, default="Entities")
    return name[:1].lower() + name[1:]


def postgresql(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _POSTGRESQL, table=ctx.table_name, feature_sql=sql_string(ctx.feature)
    )


def mysql(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_MYSQL, table=ctx.table_name, feature_sql=sql_string(ctx.feature))


def mongodb(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _MONGODB, collection=_lower_camel(ctx.feature), feature_js=js_string(ctx.feature)
    )


def redis(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_REDIS, key=ctx.table_name.replace("_", ":"))


def sqlite(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_SQLITE, table=ctx.table_name)


def generic_sql(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _GENERIC_SQL, table=ctx.table_name, feature_line=ctx.style.escape(ctx.feature)
    )
