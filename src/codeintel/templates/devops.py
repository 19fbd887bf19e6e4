"""
Infrastructure and delivery generators: container images, cluster
manifests, Terraform, CI pipelines and monitoring configuration.

Feature text only reaches YAML through js_string() and HCL through
_hcl_string(); resource names are built from identifier characters.

codeintel/src/codeintel/templates/devops.py
"""

from ..comments import js_string
from . import TemplateContext, render

__all__ = ["dockerfile", "kubernetes", "terraform", "github_actions", "prometheus", "compose"]

_DOCKERFILE = """
# Build stage
FROM node:20-alpine AS builder
WORKDIR /app

# Dependency manifests first so the install layer stays cached
COPY package*.json ./
RUN npm ci

# .dockerignore keeps node_modules, .git and local env files out of the context
COPY . .
RUN npm run build && npm prune --omit=dev

# Runtime stage
FROM node:20-alpine AS runtime
WORKDIR /app
ENV NODE_ENV=production
LABEL org.opencontainers.image.title="__NAME__"

# Unprivileged runtime user
RUN addgroup -S app && adduser -S app -G app -u 10001
COPY --from=builder --chown=app:app /app/dist ./dist
COPY --from=builder --chown=app:app /app/node_modules ./node_modules
COPY --from=builder --chown=app:app /app/package.json ./package.json
USER app

HEALTHCHECK --interval=30s --timeout=3s --start-period=10s --retries=3 \\
  CMD wget -qO- http://localhost:3000/health || exit 1

EXPOSE 3000
CMD ["node", "dist/server.js"]
"""

_KUBERNETES = """
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: __NAME__
  labels:
    app: __NAME__
  annotations:
    description: __FEATURE_YAML__
spec:
  replicas: 3
  revisionHistoryLimit: 5
  strategy:
    type: RollingUpdate
    rollingUpdate:
      maxSurge: 1
      maxUnavailable: 0
  selector:
    matchLabels:
      app: __NAME__
  template:
    metadata:
      labels:
        app: __NAME__
    spec:
      securityContext:
        runAsNonRoot: true
        runAsUser: 10001
        fsGroup: 10001
      containers:
        - name: __NAME__
          image: registry.example.com/__NAME__:1.0.0
          imagePullPolicy: IfNotPresent
          ports:
            - containerPort: 3000
              name: http
          envFrom:
            - configMapRef:
                name: __NAME__-config
          resources:
            requests:
              memory: "128Mi"
              cpu: "250m"
            limits:
              memory: "256Mi"
              cpu: "500m"
          livenessProbe:
            httpGet:
              path: /health
              port: http
            initialDelaySeconds: 15
            periodSeconds: 10
          readinessProbe:
            httpGet:
              path: /ready
              port: http
            initialDelaySeconds: 5
            periodSeconds: 5
          securityContext:
            allowPrivilegeEscalation: false
            readOnlyRootFilesystem: true
            capabilities:
              drop:
                - ALL
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: __NAME__-config
data:
  NODE_ENV: "production"
---
apiVersion: v1
kind: Service
metadata:
  name: __NAME__
spec:
  type: ClusterIP
  selector:
    app: __NAME__
  ports:
    - port: 80
      targetPort: http
      name: http
---
apiVersion: autoscaling/v2
kind: HorizontalPodAutoscaler
metadata:
  name: __NAME__
spec:
  scaleTargetRef:
    apiVersion: apps/v1
    kind: Deployment
    name: __NAME__
  minReplicas: 3
  maxReplicas: 10
  metrics:
    - type: Resource
      resource:
        name: cpu
        target:
          type: Utilization
          averageUtilization: 70
---
apiVersion: policy/v1
kind: PodDisruptionBudget
metadata:
  name: __NAME__
spec:
  minAvailable: 2
  selector:
    matchLabels:
      app: __NAME__
"""

_TERRAFORM = """
terraform {
  required_version = ">= 1.5"

  required_providers {
    aws = {
      source  = "hashicorp/aws"
      version = "~> 5.0"
    }
  }

  # Remote state with locking
  backend "s3" {
    bucket         = "__NAME__-terraform-state"
    key            = "__NAME__/terraform.tfstate"
    region         = "us-west-2"
    encrypt        = true
    dynamodb_table = "__NAME__-terraform-locks"
  }
}

provider "aws" {
  region = var.aws_region

  default_tags {
    tags = {
      Project     = var.project_name
      Environment = var.environment
      ManagedBy   = "terraform"
    }
  }
}

variable "aws_region" {
  description = "AWS region"
  type        = string
  default     = "us-west-2"
}

variable "environment" {
  description = "Deployment environment"
  type        = string

  validation {
    condition     = contains(["dev", "staging", "prod"], var.environment)
    error_message = "Environment must be dev, staging or prod."
  }
}

variable "project_name" {
  description = __FEATURE_HCL__
  type        = string
  default     = "__NAME__"
}

data "aws_availability_zones" "available" {
  state = "available"
}

resource "aws_vpc" "main" {
  cidr_block           = "10.0.0.0/16"
  enable_dns_hostnames = true
  enable_dns_support   = true

  tags = {
    Name = "${var.project_name}-vpc"
  }
}

resource "aws_subnet" "private" {
  count             = 2
  vpc_id            = aws_vpc.main.id
  cidr_block        = "10.0.${count.index + 10}.0/24"
  availability_zone = data.aws_availability_zones.available.names[count.index]

  tags = {
    Name = "${var.project_name}-private-${count.index + 1}"
  }
}

resource "aws_security_group" "app" {
  name_prefix = "${var.project_name}-app-"
  description = "Application traffic"
  vpc_id      = aws_vpc.main.id

  ingress {
    description = "HTTPS"
    from_port   = 443
    to_port     = 443
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"]
  }

  egress {
    from_port   = 0
    to_port     = 0
    protocol    = "-1"
    cidr_blocks = ["0.0.0.0/0"]
  }
}

resource "aws_kms_key" "app" {
  description             = "Encryption key for ${var.project_name}"
  deletion_window_in_days = 30
  enable_key_rotation     = true
}

output "vpc_id" {
  description = "VPC ID"
  value       = aws_vpc.main.id
}

output "private_subnet_ids" {
  description = "Private subnet IDs"
  value       = aws_subnet.private[*].id
}
"""

_GITHUB_ACTIONS = """
name: __FEATURE_YAML__

on:
  push:
    branches: [main]
  pull_request:
    branches: [main]

permissions:
  contents: read

concurrency:
  group: ${{ github.workflow }}-${{ github.ref }}
  cancel-in-progress: true

jobs:
  test:
    runs-on: ubuntu-latest
    timeout-minutes: 15
    strategy:
      matrix:
        node-version: [18, 20]
    steps:
      - uses: actions/checkout@v4
      - uses: actions/setup-node@v4
        with:
          node-version: ${{ matrix.node-version }}
          cache: npm
      - run: npm ci
      - run: npm run lint
      - run: npm test -- --coverage
      - run: npm audit --audit-level=high

  build:
    needs: test
    runs-on: ubuntu-latest
    timeout-minutes: 20
    if: github.ref == 'refs/heads/main'
    permissions:
      contents: read
      packages: write
    steps:
      - uses: actions/checkout@v4
      - uses: docker/setup-buildx-action@v3
      - uses: docker/login-action@v3
        with:
          registry: ghcr.io
          username: ${{ github.actor }}
          password: ${{ secrets.GITHUB_TOKEN }}
      - uses: docker/build-push-action@v5
        with:
          push: true
          tags: ghcr.io/${{ github.repository }}/__NAME__:${{ github.sha }}
          cache-from: type=gha
          cache-to: type=gha,mode=max
      - name: Scan image for vulnerabilities
        uses: aquasecurity/trivy-action@0.24.0
        with:
          image-ref: ghcr.io/${{ github.repository }}/__NAME__:${{ github.sha }}
          exit-code: "1"
          severity: CRITICAL,HIGH

  deploy:
    needs: build
    runs-on: ubuntu-latest
    environment: production
    steps:
      - uses: actions/checkout@v4
      - name: Roll out and wait
        run: |
          kubectl set image deployment/__NAME__ __NAME__=ghcr.io/${{ github.repository }}/__NAME__:${{ github.sha }}
          kubectl rollout status deployment/__NAME__ --timeout=300s || kubectl rollout undo deployment/__NAME__
"""

_PROMETHEUS = """
global:
  scrape_interval: 15s
  evaluation_interval: 15s

alerting:
  alertmanagers:
    - static_configs:
        - targets: ["alertmanager:9093"]

rule_files:
  - /etc/prometheus/rules/__NAME__.yml

scrape_configs:
  - job_name: __NAME__
    metrics_path: /metrics
    static_configs:
      - targets: ["__NAME__:3000"]
        labels:
          service: __NAME__

# /etc/prometheus/rules/__NAME__.yml
# groups:
#   - name: __NAME__
#     rules:
#       - alert: HighErrorRate
#         expr: sum(rate(http_requests_total{service="__NAME__",status=~"5.."}[5m])) / sum(rate(http_requests_total{service="__NAME__"}[5m])) > 0.05
#         for: 10m
#         labels:
#           severity: page
#         annotations:
#           summary: Error rate above 5% for __NAME__
#           runbook: https://runbooks.example.com/__NAME__
"""

_COMPOSE = """
name: __NAME__

services:
  app:
    build: .
    image: __NAME__:1.0.0
    user: "10001"
    read_only: true
    restart: unless-stopped
    ports:
      - "3000:3000"
    env_file:
      - .env
    healthcheck:
      test: ["CMD", "wget", "-qO-", "http://localhost:3000/health"]
      interval: 30s
      timeout: 3s
      retries: 3
    deploy:
      resources:
        limits:
          cpus: "0.50"
          memory: 256M
    logging:
      driver: json-file
      options:
        max-size: 10m
        max-file: "3"
"""


def _resource_name(ctx: TemplateContext) -> str:
    return ctx.table_name.replace("_", "-")[:40].strip("-") or "app"


def _hcl_string(text: str) -> str:
    out = []
    for ch in str(text):
        if ch in "\"\\":
            out.append("\\" + ch)
        elif ord(ch) < 0x20:
            out.append("\\u%04x" % ord(ch))
        else:
            out.append(ch)
    escaped = "".join(out).replace("${", "$${").replace("%{", "%%{")
    return '"' + escaped + '"'


def dockerfile(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_DOCKERFILE, name=_resource_name(ctx))


def kubernetes(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _KUBERNETES, name=_resource_name(ctx), feature_yaml=js_string(ctx.feature)
    )


def terraform(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _TERRAFORM, name=_resource_name(ctx), feature_hcl=_hcl_string(ctx.feature)
    )


def github_actions(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _GITHUB_ACTIONS, name=_resource_name(ctx), feature_yaml=js_string(ctx.feature)
    )


def prometheus(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_PROMETHEUS, name=_resource_name(ctx))


def compose(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_COMPOSE, name=_resource_name(ctx))
