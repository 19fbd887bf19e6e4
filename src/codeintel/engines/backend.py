"""
Backend category engine: APIs and services.

codeintel/src/codeintel/engines/backend.py
"""

import logging
import re
from typing import Optional, Pattern, Sequence

from ..comments import HASH, SLASH, CommentStyle, append_comment_block
from ..dimensions import (
    BACKEND_MAINTAINABILITY_RULES,
    BACKEND_PERFORMANCE_RULES,
    BACKEND_QUALITY_RULES,
    BACKEND_RELIABILITY_RULES,
    BACKEND_SCALABILITY_RULES,
    BACKEND_SECURITY_RULES,
    maintainability_details,
    owasp_compliance,
    reliability_details,
)
from ..dimensions.base import all_of, contains_any, lacks, matches
from ..templates import backend as templates
from ..types import MAINTAINABILITY, PERFORMANCE, QUALITY, RELIABILITY, SCALABILITY, SECURITY
from .base import WARNING, AnalyzerSpec, BaseCategoryEngine, PostProcessor, ValidationCheck
from .dispatch import TechnologyDispatch, TechnologyRoute

logger = logging.getLogger(__name__)

__all__ = ["BackendEngine"]

_EXPRESS_REQUIRE = re.compile(r"^.*\brequire\(\s*['\"]express['\"]\s*\).*$", re.MULTILINE)
_EXPRESS_IMPORT = re.compile(r"^[ \t]*import\s+express\b.*$", re.MULTILINE)
_EXPRESS_APP = re.compile(r"^[ \t]*(?:const|let|var)\s+(\w+)\s*=\s*express\(\)\s*;?\s*$", re.MULTILINE)
_FASTAPI_IMPORT = re.compile(r"^from fastapi import .*$", re.MULTILINE)
_FASTAPI_APP = re.compile(r"^(\w+)\s*=\s*FastAPI\(.*\)\s*$", re.MULTILINE)

_CODE_EXECUTION = r"(?<![.\w])(?:eval|exec)\s*\("
_HARDCODED_PASSWORD = r"(?i)password\s*[:=]\s*['\"][^'\"]+['\"]"
_HARDCODED_API_KEY = r"(?i)(?:['\"](?:sk_|pk_|api_key_)[a-zA-Z0-9]+['\"]|api[_-]?key\s*[:=]\s*['\"][^'\"]{8,}['\"])"


def _insert_after(code: str, pattern: Pattern, line: str) -> Optional[str]:
    """Insert a line after the first line matching the pattern, or None when nothing matches."""
    match = pattern.search(code)
    if match is None:
        return None
    end = code.find("\n", match.end())
    if end == -1:
        return code + "\n" + line
    return code[: end + 1] + line + "\n" + code[end + 1 :]


def _add_express_middleware(code: str, module: str, call: str) -> str:
    """Import an Express middleware module and mount it right after the app is created."""
    if _EXPRESS_IMPORT.search(code):
        updated = _insert_after(code, _EXPRESS_IMPORT, f"import {module} from '{module}';")
    else:
        updated = _insert_after(code, _EXPRESS_REQUIRE, f"const {module} = require('{module}');")
    if updated is None:
        return code
    app = _EXPRESS_APP.search(updated)
    if app is not None:
        updated = _insert_after(updated, _EXPRESS_APP, f"{app.group(1)}.use({call});") or updated
    return updated


def is_express_app(code: str) -> bool:
    return bool(_EXPRESS_REQUIRE.search(code) or _EXPRESS_IMPORT.search(code))


class BackendEngine(BaseCategoryEngine):
    """API design, security, performance and scalability for services."""

    category = "backend"
    engine_name = "BackendEngine"
    default_technology = "Node.js"

    best_practices = (
        "Use async/await for I/O operations",
        "Implement proper error handling and logging",
        "Use environment variables for configuration",
        "Implement input validation and sanitization",
        "Use HTTPS for all communications",
        "Implement rate limiting and throttling",
        "Use connection pooling for databases",
        "Implement proper authentication and authorization",
        "Follow REST API design principles",
        "Use caching strategies for performance",
        "Implement health check endpoints",
        "Use structured logging with correlation IDs",
        "Implement graceful shutdown handling",
        "Use database migrations for schema changes",
        "Follow security best practices (OWASP guidelines)",
    )
    anti_patterns = (
        "Synchronous I/O operations in request handlers",
        "Storing sensitive data in code or logs",
        "Using string concatenation for SQL queries",
        "Missing error handling for async operations",
        "Hardcoded configuration values",
        "Global state in stateless services",
        "Missing input validation",
        "Exposing stack traces to clients",
        "Not using HTTPS in production",
        "Missing rate limiting on public APIs",
        "Large payloads without pagination",
        "Not implementing graceful shutdown",
        "Missing health check endpoints",
        "Using session state in horizontally scaled services",
        "Ignoring security headers",
    )
    quality_checklist = (
        "Structured logs carry a request correlation id",
        "Timeouts and retries are set on every outbound call",
        "Secrets come from the environment or a secret manager",
        "Readiness and liveness probes are wired to the orchestrator",
    )

    def analyzer_specs(self) -> Sequence[AnalyzerSpec]:
        return (
            AnalyzerSpec(QUALITY, BACKEND_QUALITY_RULES),
            AnalyzerSpec(MAINTAINABILITY, BACKEND_MAINTAINABILITY_RULES, maintainability_details),
            AnalyzerSpec(PERFORMANCE, BACKEND_PERFORMANCE_RULES),
            AnalyzerSpec(SECURITY, BACKEND_SECURITY_RULES, owasp_compliance),
            AnalyzerSpec(SCALABILITY, BACKEND_SCALABILITY_RULES),
            AnalyzerSpec(RELIABILITY, BACKEND_RELIABILITY_RULES, reliability_details),
        )

    def build_dispatch(self) -> TechnologyDispatch:
        return TechnologyDispatch(
            [
                TechnologyRoute("nodejs", ("node", "javascript", "express", "nestjs"), templates.nodejs, SLASH),
                TechnologyRoute("python", ("python", "fastapi", "django", "flask"), templates.python, HASH),
                TechnologyRoute("java", ("java", "spring", "kotlin"), templates.java, SLASH),
                TechnologyRoute("csharp", ("c#", "csharp", ".net", "dotnet"), templates.csharp, SLASH),
                TechnologyRoute("go", ("go", "golang"), templates.go, SLASH, word_match=True),
            ],
            fallback=TechnologyRoute("python-asyncio", (), templates.generic_backend, HASH),
            table="backend",
        )

    def post_processors(self) -> Sequence[PostProcessor]:
        return (
            self.add_security_features,
            self.add_performance_optimizations,
            self.add_scalability_features,
        )

    def validation_checks(self) -> Sequence[ValidationCheck]:
        return (
            ValidationCheck(matches(_CODE_EXECUTION), "Use of eval() or exec() allows code injection"),
            ValidationCheck(matches(_HARDCODED_PASSWORD), "Hardcoded password in source code"),
            ValidationCheck(matches(_HARDCODED_API_KEY), "API key hardcoded in source code"),
            ValidationCheck(
                all_of(contains_any("http://"), lacks("https")),
                "Insecure HTTP protocol used instead of HTTPS",
                WARNING,
            ),
            ValidationCheck(
                all_of(contains_any("app.get(", "app.post(", "@app.get", "@app.post"), lacks("auth")),
                "API endpoints may lack authentication",
                WARNING,
            ),
            ValidationCheck(
                all_of(contains_any("async "), lacks("try", "catch", "except")),
                "Async operations without proper error handling",
                WARNING,
            ),
        )

    # Post-processors

    def add_security_features(self, code: str, technology: str, style: CommentStyle) -> str:
        """Mount helmet in Express apps; note throttling and host restrictions elsewhere."""
        if is_express_app(code) and "helmet" not in code:
            code = _add_express_middleware(code, "helmet", "helmet()")
        notes = []
        if _FASTAPI_APP.search(code) and "CORSMiddleware" not in code and "TrustedHostMiddleware" not in code:
            notes.append("Security: restrict allowed hosts and CORS origins for the API")
        if not any(marker in code for marker in ("rateLimit", "RateLimit", "limiter", "Limiter", "throttle")):
            notes.append("Security: apply request throttling to public endpoints")
        if not notes:
            return code
        return append_comment_block(code, notes, style)

    def add_performance_optimizations(self, code: str, technology: str, style: CommentStyle) -> str:
        """Enable response compression for Express and FastAPI apps."""
        if is_express_app(code) and "compression" not in code:
            return _add_express_middleware(code, "compression", "compression()")
        if "GZipMiddleware" not in code and _FASTAPI_IMPORT.search(code) and _FASTAPI_APP.search(code):
            app_name = _FASTAPI_APP.search(code).group(1)
            updated = _insert_after(code, _FASTAPI_IMPORT, "from fastapi.middleware.gzip import GZipMiddleware")
            return _insert_after(
                updated, _FASTAPI_APP, f"{app_name}.add_middleware(GZipMiddleware, minimum_size=1000)"
            )
        return code

    def add_scalability_features(self, code: str, technology: str, style: CommentStyle) -> str:
        """Note health checks, multi-process serving and shared session state."""
        notes = []
        if not any(path in code for path in ("/health", "/status", "/ping")):
            notes.append("Scalability: expose a health check endpoint for load balancers")
        if "node" in technology and "listen(" in code and not any(m in code for m in ("cluster", "pm2", "PM2")):
            notes.append("Scalability: run one worker per CPU core behind a process manager")
        if "session" in code and not any(m in code.lower() for m in ("redis", "store")):
            notes.append("Scalability: keep session state in a shared store")
        if not notes:
            return code
        return append_comment_block(code, notes, style)
