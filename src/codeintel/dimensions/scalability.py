"""
Scalability rule sets for backend services and infrastructure.

Positive architectural signals land in the `patterns` bucket with a bonus;
anti-patterns land in `bottlenecks`.

codeintel/src/codeintel/dimensions/scalability.py
"""

import re
from typing import Iterator

from ..types import Finding
from .base import (
    BaseRule,
    PatternRule,
    all_of,
    any_of,
    contains,
    contains_any,
    lacks,
    matches,
    not_,
    tech,
)

__all__ = ["BACKEND_SCALABILITY_RULES", "DEVOPS_SCALABILITY_RULES", "SequentialAwaitRule"]

_LOOP_HEADER = re.compile(r"^\s*(?:for\b|while\b|\w[\w.]*\.forEach\()")


class SequentialAwaitRule(BaseRule):
    """Detects await expressions in the first lines of a loop body."""

    rule_id = "BE-SCALE-SEQUENTIAL-AWAIT"
    description = "Sequential async operations in loops"

    def __init__(self, window: int = 5):
        self.window = window

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        lines = code.splitlines()
        for index, line in enumerate(lines):
            if not _LOOP_HEADER.match(line) or "for await" in line:
                continue
            body = lines[index + 1 : index + 1 + self.window]
            if any("await " in candidate for candidate in body):
                yield self.create_finding(
                    -10,
                    message="Sequential async operations in loops",
                    suggestion="Run independent async operations concurrently (Promise.all / asyncio.gather)",
                )
                return


BACKEND_SCALABILITY_RULES = [
    PatternRule(
        "BE-SCALE-CLUSTERING",
        contains_any("cluster.fork", "workers=", "gunicorn", "pm2", "PM2"),
        message="Multi-process clustering",
        bucket="patterns",
        delta=12,
    ),
    PatternRule(
        "BE-SCALE-NODE-NO-CLUSTER",
        all_of(tech("node", "express"), contains_any("listen(", "server"), lacks("cluster", "pm2", "PM2")),
        suggestion="Consider implementing Node.js clustering",
        delta=-8,
    ),
    PatternRule(
        "BE-SCALE-CACHING",
        contains_any("redis", "Redis", "memcached", "lru_cache", "cache"),
        message="Caching layer",
        bucket="patterns",
        delta=12,
    ),
    PatternRule(
        "BE-SCALE-SHARDING",
        matches(r"(?i)\b(?:shard|partition)"),
        message="Data partitioning",
        bucket="patterns",
        delta=12,
    ),
    PatternRule(
        "BE-SCALE-QUEUE",
        matches(r"(?i)\b(?:queue|job|worker|kafka|rabbitmq|celery|bullmq)\b"),
        message="Asynchronous work queue",
        bucket="patterns",
        delta=10,
    ),
    PatternRule(
        "BE-SCALE-CONNECTION-POOL",
        all_of(contains_any("pool", "Pool"), contains_any("connection", "Connection", "database", "db")),
        message="Connection pooling",
        bucket="patterns",
        delta=8,
    ),
    PatternRule(
        "BE-SCALE-NO-POOL",
        all_of(contains_any("database", "createConnection", "connect("), lacks("pool", "Pool")),
        message="Database connections without pooling",
        suggestion="Use a connection pool",
        delta=-10,
    ),
    PatternRule(
        "BE-SCALE-PAGINATION",
        matches(r"(?i)\b(?:limit|offset|cursor|page_size|pageSize|paginate)\b"),
        message="Paginated data access",
        bucket="patterns",
        delta=8,
    ),
    PatternRule(
        "BE-SCALE-UNPAGINATED",
        all_of(
            contains_any("SELECT *", ".find()", ".all()", "findAll("),
            not_(matches(r"(?i)\b(?:limit|offset|cursor|page_size|pageSize|paginate)\b")),
        ),
        message="Unpaginated collection reads",
        suggestion="Paginate collection endpoints",
        delta=-10,
    ),
    PatternRule(
        "BE-SCALE-IN-MEMORY-SESSION",
        all_of(contains("session"), contains_any("memory", "MemoryStore"), lacks("store:", "RedisStore")),
        message="In-memory sessions prevent horizontal scaling",
        suggestion="Use external session store (Redis, database)",
        delta=-15,
    ),
    PatternRule(
        "BE-SCALE-HEALTH-CHECK",
        contains_any("/health", "/status", "/ping"),
        message="Health check endpoints for load balancer",
        bucket="patterns",
        delta=10,
    ),
    PatternRule(
        "BE-SCALE-NO-HEALTH-CHECK",
        lacks("/health", "/status", "/ping"),
        message="Missing health check endpoints",
        suggestion="Add health check endpoints",
        delta=-10,
    ),
    PatternRule(
        "BE-SCALE-GRACEFUL-SHUTDOWN",
        contains_any("SIGTERM", "gracefulShutdown", "graceful_shutdown", "Shutdown("),
        message="Graceful shutdown handling",
        bucket="patterns",
        delta=8,
    ),
    PatternRule(
        "BE-SCALE-API-VERSIONING",
        contains_any("/v1/", "/api/v"),
        message="API versioning strategy",
        bucket="patterns",
        delta=5,
    ),
    PatternRule(
        "BE-SCALE-CIRCUIT-BREAKER",
        matches(r"(?i)circuit[\s_-]?breaker"),
        message="Circuit breaker pattern",
        bucket="patterns",
        delta=8,
    ),
    PatternRule(
        "BE-SCALE-PROGRESSIVE-DEPLOY",
        matches(r"(?i)\b(?:blue[\s-]green|canary)\b"),
        message="Progressive deployment strategy",
        bucket="patterns",
        delta=6,
    ),
    PatternRule(
        "BE-SCALE-IDEMPOTENCY",
        matches(r"(?i)idempoten"),
        message="Idempotency patterns",
        bucket="patterns",
        delta=6,
    ),
    PatternRule(
        "BE-SCALE-LOCAL-LOCKS",
        all_of(contains_any("synchronized", "mutex", "Mutex", "threading.Lock"), lacks("redis", "etcd", "Redlock")),
        message="Local locks not suitable for distributed systems",
        suggestion="Use distributed locking mechanisms",
        delta=-10,
    ),
    PatternRule(
        "BE-SCALE-GLOBAL-STATE",
        all_of(matches(r"^(?:let|var)\s+\w+\s*=\s*(?:\[\]|\{\}|new Map)", re.MULTILINE), contains("app.")),
        message="Process-local mutable state shared across requests",
        suggestion="Keep request handlers stateless",
        delta=-10,
    ),
    PatternRule(
        "BE-SCALE-DJANGO-NO-CACHE",
        all_of(tech("django"), lacks("cache")),
        suggestion="Configure Django's cache framework",
        delta=-5,
    ),
    PatternRule(
        "BE-SCALE-SYNC-HTTP-CLIENT",
        all_of(tech("python", "fastapi", "flask", "django"), contains("requests."), lacks("async")),
        suggestion="Use an async HTTP client such as httpx for outbound calls",
        delta=-7,
    ),
    SequentialAwaitRule(),
]

_HEALTH_CHECKS = ("HEALTHCHECK", "readinessProbe", "livenessProbe", "healthcheck:")

DEVOPS_SCALABILITY_RULES = [
    PatternRule(
        "DEVOPS-SCALE-SINGLE-REPLICA",
        matches(r"\breplicas:[ \t]*1\b"),
        message="Single replica deployment",
        suggestion="Run at least two replicas behind the service",
        delta=-12,
    ),
    PatternRule(
        "DEVOPS-SCALE-AUTOSCALING",
        contains("HorizontalPodAutoscaler"),
        message="Horizontal pod autoscaling",
        bucket="patterns",
        delta=12,
    ),
    PatternRule(
        "DEVOPS-SCALE-ROLLING-UPDATE",
        contains("RollingUpdate"),
        message="Rolling update strategy",
        bucket="patterns",
        delta=8,
    ),
    PatternRule(
        "DEVOPS-SCALE-DISRUPTION-BUDGET",
        contains("PodDisruptionBudget"),
        message="Disruption budget keeps capacity during maintenance",
        bucket="patterns",
        delta=6,
    ),
    PatternRule(
        "DEVOPS-SCALE-HEALTH-CHECKS",
        contains_any(*_HEALTH_CHECKS),
        message="Health checks for orchestration",
        bucket="patterns",
        delta=8,
    ),
    PatternRule(
        "DEVOPS-SCALE-NO-HEALTH-CHECKS",
        all_of(
            any_of(matches(r"(?m)^[ \t]*FROM[ \t]+\S"), contains_any("containers:", "services:")),
            lacks(*_HEALTH_CHECKS),
        ),
        message="No health checks",
        suggestion="Add health checks so orchestrators can route traffic and restart failed containers",
        delta=-10,
    ),
    PatternRule(
        "DEVOPS-SCALE-LOCAL-STATE",
        all_of(contains("terraform {"), lacks('backend "')),
        message="Terraform state kept on the local disk",
        suggestion="Use a remote backend with state locking",
        delta=-10,
    ),
    PatternRule(
        "DEVOPS-SCALE-MULTI-ZONE",
        contains_any("availability_zone", "topologySpreadConstraints", "podAntiAffinity"),
        message="Workloads spread across zones",
        bucket="patterns",
        delta=6,
    ),
]
