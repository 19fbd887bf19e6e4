"""Pytest configuration and fixtures for codeintel tests."""

import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from codeintel.config import Config
from codeintel.dispatcher import UnifiedDispatcher
from codeintel.engines import BackendEngine, DatabaseEngine, DevOpsEngine, FrontendEngine, MobileEngine


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir: Path) -> Config:
    """Create a sample Config object for testing."""
    return Config(
        project_root=temp_dir,
        config_dict={
            "default_category": "backend",
            "default_quality": "standard",
            "rules": {"BE-QUALITY-NO-LOGGING": "OFF"},
        },
    )


@pytest.fixture
def pyproject_toml(temp_dir: Path) -> Path:
    """Create a sample pyproject.toml file."""
    config_path = temp_dir / "pyproject.toml"
    config_path.write_text(
        """[project]
name = "sample"

[tool.codeintel]
default_category = "frontend"
default_quality = "enterprise"

[tool.codeintel.rules]
DB-QUALITY-SELECT-STAR = "OFF"
FE-QUALITY-CONSOLE-LOG = false
"""
    )
    return config_path


@pytest.fixture
def database_engine() -> DatabaseEngine:
    return DatabaseEngine()


@pytest.fixture
def backend_engine() -> BackendEngine:
    return BackendEngine()


@pytest.fixture
def frontend_engine() -> FrontendEngine:
    return FrontendEngine()


@pytest.fixture
def devops_engine() -> DevOpsEngine:
    return DevOpsEngine()


@pytest.fixture
def mobile_engine() -> MobileEngine:
    return MobileEngine()


@pytest.fixture
def dispatcher() -> UnifiedDispatcher:
    return UnifiedDispatcher()


@pytest.fixture
def context7_data() -> dict:
    """Context7 payload in its camelCase wire form."""
    return {
        "insights": {
            "patterns": [
                "React best practice: keep components small",
                "Avoid React class components in new code",
                "PostgreSQL best practice: index foreign keys",
            ],
            "recommendations": [
                "Use React Suspense for data fetching",
                "Review authentication flows for security gaps",
                "Measure bundle size for performance regressions",
            ],
            "qualityMetrics": {"overall": 0.82, "coverage": 0.7},
        },
        "projectContext": {"name": "shop"},
        "technologyInsights": {
            "frameworks": ["Next.js", "Remix"],
            "libraries": ["zod", 42],
            "tools": ["Vite"],
            "trends": ["Server components"],
        },
    }


@pytest.fixture
def express_app() -> str:
    return """const express = require('express');
const app = express();

app.get('/users', async (req, res) => {
  const users = await db.query('SELECT id FROM users LIMIT 10');
  res.json(users);
});

app.listen(3000);
"""


@pytest.fixture
def schema_sql() -> str:
    return """-- Customer accounts
CREATE TABLE customers (
    id SERIAL PRIMARY KEY,
    email VARCHAR(255) NOT NULL UNIQUE
);

CREATE TABLE orders (
    id SERIAL PRIMARY KEY,
    customer_id INT NOT NULL REFERENCES customers (id) ON DELETE CASCADE,
    total NUMERIC(10, 2) NOT NULL CHECK (total >= 0)
);

CREATE INDEX idx_orders_customer ON orders (customer_id);
"""


@pytest.fixture
def root_dockerfile() -> str:
    return """FROM node:latest
WORKDIR /app
COPY . .
RUN npm install
EXPOSE 3000
CMD ["node", "server.js"]
"""


@pytest.fixture
def bare_deployment() -> str:
    return """apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  replicas: 1
  template:
    spec:
      containers:
        - name: web
          image: registry.example.com/web:2.3.1
          ports:
            - containerPort: 8080
"""


@pytest.fixture
def rn_screen() -> str:
    return """import React from 'react';
import { ScrollView, Text, TouchableOpacity } from 'react-native';

const Feed: React.FC = () => {
  console.log('render feed');
  return (
    <ScrollView>
      {items.map((item) => (
        <TouchableOpacity onPress={() => open(item)}>
          <Text>{item.title}</Text>
        </TouchableOpacity>
      ))}
    </ScrollView>
  );
};

export default Feed;
"""
