"""
DevOps category engine: container images, cluster manifests, infrastructure
as code, delivery pipelines and monitoring.

codeintel/src/codeintel/engines/devops.py
"""

import logging
import re
from typing import Sequence

from ..comments import HASH, CommentStyle, append_comment_block
from ..dimensions import (
    DEVOPS_MAINTAINABILITY_RULES,
    DEVOPS_PERFORMANCE_RULES,
    DEVOPS_QUALITY_RULES,
    DEVOPS_RELIABILITY_RULES,
    DEVOPS_SCALABILITY_RULES,
    DEVOPS_SECURITY_RULES,
    maintainability_details,
    owasp_compliance,
)
from ..dimensions.base import all_of, contains, contains_any, lacks, matches
from ..dimensions.security import HARDCODED_SECRET
from ..templates import devops as templates
from ..types import MAINTAINABILITY, PERFORMANCE, QUALITY, RELIABILITY, SCALABILITY, SECURITY
from .base import SUGGESTION, WARNING, AnalyzerSpec, BaseCategoryEngine, PostProcessor, ValidationCheck
from .dispatch import TechnologyDispatch, TechnologyRoute

logger = logging.getLogger(__name__)

__all__ = ["DevOpsEngine"]

_FROM_LINE = re.compile(r"(?m)^[ \t]*FROM[ \t]+\S")
_USER_LINE = re.compile(r"(?m)^[ \t]*USER[ \t]+\S")
_ROOT_USER = r"(?m)^[ \t]*USER[ \t]+(?:root|0)\b"
_START_INSTRUCTION = re.compile(r"(?m)^[ \t]*(?:CMD|ENTRYPOINT)\b")
_LATEST_TAG = r"(?m)(?:^[ \t]*FROM[ \t]+|image:[ \t]*['\"]?)[\w./-]+:latest\b"
_PIPE_TO_SHELL = r"\b(?:curl|wget)\b[^|\n]{0,300}\|[ \t]*(?:sudo[ \t]+)?(?:ba)?sh\b"
_FIRST_CONTAINER = re.compile(r"(?m)^[ \t]*containers:[ \t]*\n([ \t]*)- name:[^\n]*\n")

_DOCKERFILE = matches(_FROM_LINE.pattern)
_PIPELINE_MARKERS = ("jobs:", "stages:", "pipeline {")
_SCANNERS = ("trivy", "grype", "snyk", "npm audit", "pip-audit", "dependency-check")

_RESOURCES = """resources:
  requests:
    cpu: "100m"
    memory: "128Mi"
  limits:
    cpu: "500m"
    memory: "256Mi"
"""
_SECURITY_CONTEXT = """securityContext:
  runAsNonRoot: true
  allowPrivilegeEscalation: false
"""


def _indent(block: str, prefix: str) -> str:
    return "".join(prefix + line + "\n" for line in block.splitlines())


def is_dockerfile(code: str) -> bool:
    return _FROM_LINE.search(code) is not None


class DevOpsEngine(BaseCategoryEngine):
    """Container, orchestration, pipeline and infrastructure analysis."""

    category = "devops"
    engine_name = "DevOpsEngine"
    default_technology = "Docker"

    best_practices = (
        "Use multi-stage Docker builds for optimization",
        "Implement proper resource limits in Kubernetes",
        "Enable health checks for all containers",
        "Use Infrastructure as Code for consistency",
        "Implement automated testing in CI/CD pipelines",
        "Monitor and alert on key system metrics",
        "Implement proper backup and disaster recovery",
        "Use secrets management for sensitive data",
        "Implement security scanning in pipelines",
        "Practice immutable infrastructure",
    )
    anti_patterns = (
        "Running containers as root user",
        "Using latest tags in production",
        "Hardcoding secrets in configuration files",
        "Manual deployment processes",
        "Ignoring resource limits",
        "No monitoring or alerting",
        "No backup strategy",
        "Direct production access",
        "Shared mutable infrastructure",
        "No disaster recovery plan",
    )
    quality_checklist = (
        "Images scanned for vulnerabilities before they are pushed",
        "Every workload declares CPU and memory requests and limits",
        "Infrastructure plans reviewed before they are applied",
        "Rollback procedure rehearsed for each release",
    )

    def analyzer_specs(self) -> Sequence[AnalyzerSpec]:
        return (
            AnalyzerSpec(QUALITY, DEVOPS_QUALITY_RULES),
            AnalyzerSpec(MAINTAINABILITY, DEVOPS_MAINTAINABILITY_RULES, maintainability_details),
            AnalyzerSpec(PERFORMANCE, DEVOPS_PERFORMANCE_RULES),
            AnalyzerSpec(SECURITY, DEVOPS_SECURITY_RULES, owasp_compliance),
            AnalyzerSpec(SCALABILITY, DEVOPS_SCALABILITY_RULES),
            AnalyzerSpec(RELIABILITY, DEVOPS_RELIABILITY_RULES),
        )

    def build_dispatch(self) -> TechnologyDispatch:
        return TechnologyDispatch(
            [
                TechnologyRoute("compose", ("compose",), templates.compose, HASH),
                TechnologyRoute(
                    "kubernetes", ("kubernetes", "k8s", "helm", "kustomize", "openshift"), templates.kubernetes, HASH
                ),
                TechnologyRoute("terraform", ("terraform", "hcl", "opentofu"), templates.terraform, HASH),
                TechnologyRoute(
                    "github-actions",
                    ("github", "gitlab", "jenkins", "circleci", "pipeline", "ci/cd", "actions"),
                    templates.github_actions,
                    HASH,
                ),
                TechnologyRoute(
                    "prometheus", ("prometheus", "grafana", "alertmanager", "monitoring"), templates.prometheus, HASH
                ),
            ],
            fallback=TechnologyRoute("docker", (), templates.dockerfile, HASH),
            table="devops",
        )

    def post_processors(self) -> Sequence[PostProcessor]:
        return (
            self.add_container_hardening,
            self.add_workload_limits,
            self.add_pipeline_safeguards,
            self.add_state_backend_note,
        )

    def validation_checks(self) -> Sequence[ValidationCheck]:
        return (
            ValidationCheck(matches(_ROOT_USER), "Container runs as root"),
            ValidationCheck(matches(r"privileged:[ \t]*true"), "Privileged containers are not allowed"),
            ValidationCheck(matches(HARDCODED_SECRET), "Hardcoded secret in configuration"),
            ValidationCheck(matches(_LATEST_TAG), "Image uses the mutable latest tag", WARNING),
            ValidationCheck(
                all_of(contains("containers:"), lacks("resources:")),
                "Containers without resource requests and limits",
                WARNING,
            ),
            ValidationCheck(matches(_PIPE_TO_SHELL), "Remote script piped into a shell", WARNING),
            ValidationCheck(all_of(_DOCKERFILE, lacks("HEALTHCHECK")), "Add a HEALTHCHECK instruction", SUGGESTION),
            ValidationCheck(
                all_of(contains("containers:"), lacks("securityContext")),
                "Define a securityContext for containers",
                SUGGESTION,
            ),
            ValidationCheck(
                all_of(contains_any(*_PIPELINE_MARKERS), lacks(*_SCANNERS)),
                "Scan images and dependencies in the pipeline",
                SUGGESTION,
            ),
        )

    # Post-processors

    def add_container_hardening(self, code: str, technology: str, style: CommentStyle) -> str:
        """Drop root before the start instruction and flag missing health checks and floating tags."""
        if not is_dockerfile(code):
            return code
        notes = []
        if _USER_LINE.search(code) is None:
            last_from = list(_FROM_LINE.finditer(code))[-1]
            start = _START_INSTRUCTION.search(code, last_from.end())
            if start is not None:
                code = code[: start.start()] + "USER 10001\n" + code[start.start() :]
            else:
                notes.append("Security: switch to a non-root USER before the container starts")
        if "HEALTHCHECK" not in code:
            notes.append("Reliability: add a container health check instruction")
        if re.search(_LATEST_TAG, code):
            notes.append("Security: pin base images to a version or digest instead of latest")
        return append_comment_block(code, notes, style) if notes else code

    def add_workload_limits(self, code: str, technology: str, style: CommentStyle) -> str:
        """Give the first container resource limits and a restrictive securityContext."""
        if "containers:" not in code:
            return code
        missing = ""
        if "resources:" not in code:
            missing += _RESOURCES
        if "securityContext" not in code:
            missing += _SECURITY_CONTEXT
        if not missing:
            return code
        container = _FIRST_CONTAINER.search(code)
        if container is None:
            return append_comment_block(
                code, ["Reliability: set resources and securityContext on every container"], style
            )
        block = _indent(missing, container.group(1) + "  ")
        return code[: container.end()] + block + code[container.end() :]

    def add_pipeline_safeguards(self, code: str, technology: str, style: CommentStyle) -> str:
        if not any(marker in code for marker in _PIPELINE_MARKERS):
            return code
        notes = []
        if "cache" not in code:
            notes.append("Performance: reuse dependency downloads between pipeline runs")
        if not any(scanner in code for scanner in _SCANNERS):
            notes.append("Security: scan images and dependencies before deploying")
        return append_comment_block(code, notes, style) if notes else code

    def add_state_backend_note(self, code: str, technology: str, style: CommentStyle) -> str:
        if 'resource "' not in code or 'backend "' in code:
            return code
        return append_comment_block(
            code, ["Reliability: keep Terraform state in a locked remote backend"], style
        )
