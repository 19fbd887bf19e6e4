"""
Reliability rule sets for backend services and infrastructure.

codeintel/src/codeintel/dimensions/reliability.py
"""

import re
from typing import Any, Dict

from .base import PatternRule, all_of, any_of, contains, contains_any, lacks, matches, not_

__all__ = ["BACKEND_RELIABILITY_RULES", "DEVOPS_RELIABILITY_RULES", "reliability_details"]

_HANDLES_ERRORS = any_of(
    all_of(matches(r"\btry\s*\{"), matches(r"\bcatch\s*[({]")),
    all_of(matches(r"^[ \t]*try[ \t]*:", re.MULTILINE), matches(r"^[ \t]*except\b", re.MULTILINE)),
    matches(r"if\s+err\s*!=\s*nil"),
    contains_any(".catch(", "@ExceptionHandler", "errorHandler", "exception_handler"),
)
_LOGS = matches(r"(?i)log|logger")
_VALIDATES = matches(r"(?i)validat|joi|yup|zod|pydantic|BaseModel|@Valid")
_MONITORS = matches(r"(?i)prometheus|metrics|telemetry|opentelemetry|/health")

BACKEND_RELIABILITY_RULES = [
    PatternRule(
        "BE-REL-NO-ERROR-HANDLING",
        not_(_HANDLES_ERRORS),
        message="Missing error handling",
        suggestion="Add try/catch (or try/except) around fallible operations",
        delta=-20,
    ),
    PatternRule(
        "BE-REL-NO-LOGGING",
        not_(_LOGS),
        message="Missing logging",
        suggestion="Add structured logging",
        delta=-10,
    ),
    PatternRule(
        "BE-REL-NO-VALIDATION",
        not_(_VALIDATES),
        message="Missing input validation",
        suggestion="Validate inputs at service boundaries",
        delta=-15,
    ),
    PatternRule(
        "BE-REL-NO-TIMEOUTS",
        all_of(
            contains_any("fetch(", "axios.", "requests.", "http.Get(", "HttpClient"),
            lacks("timeout", "Timeout", "AbortController"),
        ),
        message="Outbound calls without timeouts",
        suggestion="Set timeouts on outbound calls",
        delta=-5,
    ),
    PatternRule(
        "BE-REL-UNHANDLED-REJECTIONS",
        contains_any("process.on('unhandledRejection'", 'process.on("unhandledRejection"', "uncaughtException"),
        delta=5,
    ),
    PatternRule("BE-REL-RETRY", matches(r"(?i)\bretr(?:y|ies)\b|backoff"), delta=5),
    PatternRule("BE-REL-HEALTH-ENDPOINT", contains_any("/health", "/healthz", "/ready"), delta=5),
    PatternRule(
        "BE-REL-EMPTY-CATCH",
        matches(r"catch\s*\([^()]*\)\s*\{\s*\}|except[^:\n]{0,200}:[ \t]*\n[ \t]*pass\b"),
        message="Errors silently swallowed",
        suggestion="Log or rethrow caught errors",
        delta=-10,
    ),
    PatternRule(
        "BE-REL-NO-SHUTDOWN",
        all_of(contains_any("listen(", "ListenAndServe", "uvicorn.run", "app.Run("), lacks("SIGTERM", "shutdown", "Shutdown")),
        suggestion="Handle SIGTERM for graceful shutdown",
        delta=-3,
    ),
]

DEVOPS_RELIABILITY_RULES = [
    PatternRule(
        "DEVOPS-REL-NO-PROBES",
        all_of(contains_any("containers:"), lacks("readinessProbe", "livenessProbe")),
        message="Containers without liveness or readiness probes",
        suggestion="Add liveness and readiness probes",
        delta=-15,
    ),
    PatternRule(
        "DEVOPS-REL-NO-HEALTHCHECK",
        all_of(matches(r"(?m)^[ \t]*FROM[ \t]+\S"), lacks("HEALTHCHECK")),
        suggestion="Add a HEALTHCHECK instruction",
        delta=-5,
    ),
    PatternRule(
        "DEVOPS-REL-NO-RESTART-POLICY",
        all_of(contains("services:"), contains_any("image:", "build:"), lacks("restart:")),
        suggestion="Set a restart policy for compose services",
        delta=-5,
    ),
    PatternRule(
        "DEVOPS-REL-UNLOCKED-STATE",
        all_of(contains('backend "s3"'), lacks("dynamodb_table", "use_lockfile")),
        message="Remote state without locking",
        suggestion="Enable state locking for the Terraform backend",
        delta=-10,
    ),
    PatternRule(
        "DEVOPS-REL-NO-JOB-TIMEOUT",
        all_of(contains("runs-on:"), lacks("timeout-minutes")),
        suggestion="Set job timeouts so stuck runs fail fast",
        delta=-3,
    ),
    PatternRule("DEVOPS-REL-ROLLBACK", matches(r"(?i)rollout undo|rollback|blue[\s-]green|canary"), delta=6),
    PatternRule("DEVOPS-REL-ALERTING", contains_any("alertmanager", "alert:", "alerting:"), delta=6),
]


def reliability_details(score: int, code: str, technology: str) -> Dict[str, Any]:
    return {
        "errorHandling": 85 if _HANDLES_ERRORS(code, technology) else 60,
        "logging": 80 if _LOGS(code, technology) else 50,
        "monitoring": 75 if _MONITORS(code, technology) else 60,
    }
