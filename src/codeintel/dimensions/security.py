"""
Security rule sets.

Backend rules follow the OWASP Top 10 (2021) categories; the category code
(A01..A10) is carried in the message text only.

codeintel/src/codeintel/dimensions/security.py
"""

import re
from typing import Any, Dict

from .base import (
    PatternRule,
    all_of,
    any_of,
    contains,
    contains_any,
    lacks,
    matches,
    matches_any,
    not_,
    tech,
    tech_word,
)

__all__ = [
    "DATABASE_SECURITY_RULES",
    "BACKEND_SECURITY_RULES",
    "FRONTEND_SECURITY_RULES",
    "DEVOPS_SECURITY_RULES",
    "MOBILE_SECURITY_RULES",
    "HARDCODED_SECRET",
    "MOBILE_API_KEY",
    "CLEARTEXT_URL",
    "SQL_CONCATENATION",
    "SQL_INTERPOLATION",
    "owasp_compliance",
]

# String literal holding SQL followed by a + concatenation on the same line.
SQL_CONCATENATION = r"(?i)\b(?:SELECT|INSERT|UPDATE|DELETE)\b[^;\n]{0,500}[\"'`]\s*\+"
# SQL built with ${...} template literals or Python f-strings.
SQL_INTERPOLATION = (
    r"(?i)\b(?:SELECT|INSERT|UPDATE|DELETE)\b[^;\n]{0,500}\$\{"
    r"|\bf[\"'][^\"'\n]{0,300}\b(?:SELECT|INSERT|UPDATE|DELETE)\b[^\"'\n]{0,300}\{"
)

_HARDCODED_PASSWORD = r"(?i)password\s*[:=]\s*['\"][^'\"]+['\"]"
_PYTHON = tech("python", "django", "flask", "fastapi")
_NODE = tech("node", "express", "nest")
_JAVA = tech_word("java", "spring", "kotlin")

DATABASE_SECURITY_RULES = [
    PatternRule(
        "DB-SEC-INTERPOLATION",
        contains_any("${", "%s", "' +", '" +', "' ||"),
        message="String interpolation in SQL queries",
        suggestion="Use parameterized queries",
        delta=-25,
    ),
    PatternRule(
        "DB-SEC-HARDCODED-CREDENTIALS",
        matches(_HARDCODED_PASSWORD),
        message="Hardcoded database credentials",
        suggestion="Load credentials from a secret store or environment",
        delta=-30,
    ),
    PatternRule(
        "DB-SEC-NO-ACCESS-CONTROL",
        lacks("GRANT", "permission", "ROLE", "POLICY", "requirepass", "ACL"),
        suggestion="Implement proper access controls",
        delta=-10,
    ),
    PatternRule(
        "DB-SEC-BROAD-GRANT",
        matches(r"GRANT\s+ALL", re.IGNORECASE),
        message="Overly broad privileges granted",
        suggestion="Grant the least privileges each role needs",
        delta=-10,
    ),
    PatternRule(
        "DB-SEC-UNGUARDED-DESTRUCTIVE",
        all_of(
            matches(r"\b(?:DROP|DELETE|TRUNCATE)\b"),
            lacks("BEGIN", "TRANSACTION", "startSession", "MULTI"),
        ),
        suggestion="Use transactions for destructive operations",
        delta=-5,
    ),
    PatternRule(
        "DB-SEC-ROW-LEVEL-SECURITY",
        contains_any("ROW LEVEL SECURITY", "CREATE POLICY"),
        delta=5,
    ),
    PatternRule(
        "DB-SEC-ENCRYPTION",
        contains_any("pgcrypto", "AES_ENCRYPT", "encrypt(", "ENCRYPTION"),
        delta=3,
    ),
    PatternRule(
        "DB-SEC-PLAINTEXT-PASSWORD-COLUMN",
        all_of(matches(r"(?i)\bpassword\s+(?:VARCHAR|TEXT|CHAR)\b"), lacks("hash", "HASH")),
        message="Password column stored in plain text",
        suggestion="Store password hashes, never plain passwords",
        delta=-20,
    ),
]

BACKEND_SECURITY_RULES = [
    PatternRule(
        "BE-SEC-A01-ACCESS-CONTROL",
        all_of(contains("req.user"), lacks("authorization", "authenticate", "authorize")),
        message="A01: Missing access control checks",
        suggestion="Implement proper authorization middleware",
        delta=-20,
    ),
    PatternRule(
        "BE-SEC-A01-ADMIN-RBAC",
        all_of(contains("admin"), lacks("role", "permission")),
        message="A01: Admin functionality without role-based access",
        suggestion="Implement role-based access control (RBAC)",
        delta=-15,
    ),
    PatternRule(
        "BE-SEC-A02-PASSWORD-HASHING",
        all_of(contains("password"), lacks("bcrypt", "argon2", "scrypt", "pbkdf2", "BCrypt")),
        message="A02: Weak password hashing",
        suggestion="Use bcrypt or similar for password hashing",
        delta=-25,
    ),
    PatternRule(
        "BE-SEC-A02-WEAK-CRYPTO",
        matches(r"(?i)\b(?:md5|sha1)\b"),
        message="A02: Use of weak cryptographic algorithms",
        suggestion="Use SHA-256 or stronger cryptographic algorithms",
        delta=-20,
    ),
    PatternRule(
        "BE-SEC-A02-PLAIN-HTTP",
        all_of(contains("http://"), lacks("https")),
        message="A02: Insecure communication protocol",
        suggestion="Use HTTPS for all communications",
        delta=-15,
    ),
    PatternRule(
        "BE-SEC-A03-CODE-INJECTION",
        contains_any("eval(", "Function(", "exec("),
        message="A03: Code injection vulnerability",
        suggestion="Avoid eval(), exec() and Function() constructors",
        delta=-30,
    ),
    PatternRule(
        "BE-SEC-A03-SQL-INJECTION",
        all_of(matches(SQL_CONCATENATION), lacks("prepare")),
        message="A03: Potential SQL injection",
        suggestion="Use parameterized queries or prepared statements",
        delta=-25,
    ),
    PatternRule(
        "BE-SEC-A03-COMMAND-INJECTION",
        contains_any("spawn(", "os.system(", "subprocess.call(", "shell=True", "Runtime.getRuntime().exec"),
        message="A03: Command injection risk",
        suggestion="Sanitize inputs for system commands",
        delta=-20,
    ),
    PatternRule(
        "BE-SEC-A04-LOGIN-RATE-LIMIT",
        all_of(contains_any("login", "auth"), lacks("rate", "Rate", "throttle")),
        message="A04: Missing rate limiting on authentication",
        suggestion="Implement rate limiting for login attempts",
        delta=-10,
    ),
    PatternRule(
        "BE-SEC-A05-DEBUG-ENABLED",
        matches(r"(?i)\bdebug\s*[:=]\s*true\b"),
        message="A05: Debug mode enabled in production",
        suggestion="Disable debug mode in production",
        delta=-12,
    ),
    PatternRule(
        "BE-SEC-A05-SECURITY-HEADERS",
        all_of(_NODE, contains("express"), lacks("helmet")),
        message="A05: Missing security headers",
        suggestion="Use helmet.js for security headers",
        delta=-8,
    ),
    PatternRule(
        "BE-SEC-A05-CORS",
        all_of(_NODE, contains("express"), lacks("cors")),
        message="A05: Missing CORS configuration",
        suggestion="Configure CORS properly",
        delta=-8,
    ),
    PatternRule(
        "BE-SEC-A06-DEPENDENCIES",
        contains_any("require(", "import "),
        suggestion="Regularly update dependencies and check for vulnerabilities",
    ),
    PatternRule(
        "BE-SEC-A07-SESSION",
        all_of(contains("session"), lacks("secure")),
        message="A07: Insecure session configuration",
        suggestion="Configure secure session settings",
        delta=-12,
    ),
    PatternRule(
        "BE-SEC-A07-JWT-VERIFY",
        all_of(contains_any("jwt", "JWT"), lacks("verify", "decode(")),
        message="A07: JWT without proper verification",
        suggestion="Always verify JWT tokens",
        delta=-15,
    ),
    PatternRule(
        "BE-SEC-A08-INPUT-VALIDATION",
        all_of(contains_any("req.body", "request.json", "request.form"), lacks("validate", "validationResult", "BaseModel")),
        message="A08: Missing input validation",
        suggestion="Validate all input data",
        delta=-15,
    ),
    PatternRule(
        "BE-SEC-A09-LOGGING",
        lacks("log", "audit"),
        message="A09: Insufficient security logging",
        suggestion="Implement comprehensive security logging",
        delta=-10,
    ),
    PatternRule(
        "BE-SEC-A10-SSRF",
        all_of(contains_any("http.get(", "fetch(", "requests.get(", "axios.get("), lacks("allowlist", "whitelist", "allowedHosts")),
        message="A10: Potential SSRF vulnerability",
        suggestion="Validate and whitelist external URLs",
        delta=-12,
    ),
    PatternRule(
        "BE-SEC-HARDCODED-PASSWORD",
        matches(_HARDCODED_PASSWORD),
        message="Hardcoded passwords detected",
        suggestion="Use environment variables for credentials",
        delta=-20,
    ),
    PatternRule(
        "BE-SEC-EXPOSED-API-KEY",
        matches(r"(?i)(?:['\"](?:sk_|pk_|api_key_)[a-zA-Z0-9]+['\"]|api[_-]?key\s*[:=]\s*['\"][^'\"]{8,}['\"])"),
        message="API keys exposed in code",
        suggestion="Use environment variables for API keys",
        delta=-20,
    ),
    PatternRule(
        "BE-SEC-UPLOAD-LIMITS",
        all_of(contains_any("upload", "multer", "UploadFile"), lacks("limit", "fileSize", "max_size")),
        message="File upload without size limits",
        suggestion="Implement file size and type restrictions",
        delta=-8,
    ),
    PatternRule(
        "BE-SEC-UNENCRYPTED-DB-CONNECTION",
        all_of(contains_any("mongodb://", "mysql://", "postgres://"), lacks("ssl", "tls")),
        message="Database connection without encryption",
        suggestion="Use SSL/TLS for database connections",
        delta=-8,
    ),
    PatternRule(
        "BE-SEC-NODE-DYNAMIC-REQUIRE",
        all_of(_NODE, matches(r"require\([^()]*\.\.")),
        message="Path traversal vulnerability in require()",
        suggestion="Sanitize file paths and avoid dynamic requires",
        delta=-15,
    ),
    PatternRule(
        "BE-SEC-PYTHON-PICKLE",
        all_of(_PYTHON, contains("pickle"), contains("load")),
        message="Unsafe deserialization with pickle",
        suggestion="Avoid pickle for untrusted data",
        delta=-20,
    ),
    PatternRule(
        "BE-SEC-JAVA-DESERIALIZATION",
        all_of(_JAVA, contains("ObjectInputStream")),
        message="Java deserialization vulnerability",
        suggestion="Validate serialized objects or use safer alternatives",
        delta=-18,
    ),
    PatternRule(
        "BE-SEC-PHP-SUPERGLOBALS",
        all_of(tech("php"), contains_any("$_GET", "$_POST"), lacks("filter_", "validate")),
        message="Unvalidated user input",
        suggestion="Use filter_input() for input validation",
        delta=-12,
    ),
    PatternRule("BE-SEC-HELMET", all_of(_NODE, contains("helmet")), delta=8),
    PatternRule("BE-SEC-CSP", contains_any("csp", "Content-Security-Policy", "contentSecurityPolicy"), delta=5),
    PatternRule("BE-SEC-MFA", matches(r"(?i)\b(?:2fa|mfa|totp)\b"), delta=8),
    PatternRule("BE-SEC-AUDIT", contains_any("audit", "security-scan"), delta=3),
]

FRONTEND_SECURITY_RULES = [
    PatternRule(
        "FE-SEC-INNERHTML",
        all_of(contains("innerHTML"), lacks("sanitize", "DOMPurify")),
        message="Potential XSS vulnerability with innerHTML",
        suggestion="Sanitize HTML before assigning innerHTML or use textContent",
        delta=-20,
    ),
    PatternRule(
        "FE-SEC-EVAL",
        contains("eval("),
        message="Use of eval() is a security risk",
        suggestion="Avoid eval(); parse data with JSON.parse",
        delta=-30,
    ),
    PatternRule(
        "FE-SEC-DANGEROUS-HTML",
        all_of(contains_any("dangerouslySetInnerHTML", "v-html", "[innerHTML]"), lacks("sanitize", "DOMPurify")),
        message="Unsanitized HTML injection in component",
        suggestion="Sanitize HTML with DOMPurify before rendering",
        delta=-15,
    ),
    PatternRule(
        "FE-SEC-TARGET-BLANK",
        all_of(contains('target="_blank"'), lacks("noopener")),
        message='Links with target="_blank" without rel="noopener"',
        suggestion='Add rel="noopener noreferrer" to external links',
        delta=-5,
    ),
    PatternRule(
        "FE-SEC-MIXED-CONTENT",
        matches(r"(?:src|href)=\"http://(?!localhost)"),
        message="Resources loaded over insecure HTTP",
        suggestion="Load all resources over HTTPS",
        delta=-5,
    ),
    PatternRule(
        "FE-SEC-TOKEN-STORAGE",
        all_of(contains_any("localStorage", "sessionStorage"), matches(r"(?i)token|jwt")),
        message="Auth tokens kept in web storage are readable by scripts",
        suggestion="Store session tokens in httpOnly cookies",
        delta=-10,
    ),
    PatternRule(
        "FE-SEC-CSP-META",
        any_of(contains("Content-Security-Policy"), matches_any(r"integrity=\"sha\d{3}-")),
        delta=5,
    ),
]

# Secret-looking key assigned a literal value; references to variables,
# templating and Terraform data sources are not literals.
HARDCODED_SECRET = (
    r"(?im)^[ \t-]*(?:(?:ENV|ARG|export)[ \t]+)?[\w.-]{0,60}?(?:password|passwd|secret|api[_-]?key|access[_-]?key|token)[\w-]{0,30}[ \t]*[:=][ \t]*"
    r"['\"]?(?!\$|\{\{|var\.|data\.|<)[^\s'\"#]{4,}"
)
MOBILE_API_KEY = r"(?i)(?:api[_-]?key|apikey|client[_-]?secret)\w{0,30}['\"]?\s*[:=]\s*['\"][A-Za-z0-9_\-]{16,}['\"]"
CLEARTEXT_URL = r"['\"]http://(?!localhost|127\.0\.0\.1|10\.0\.2\.2)"

DEVOPS_SECURITY_RULES = [
    PatternRule(
        "DEVOPS-SEC-HARDCODED-SECRET",
        matches(HARDCODED_SECRET),
        message="Hardcoded secret in configuration",
        suggestion="Load secrets from a secret manager or the CI secret store",
        delta=-25,
    ),
    PatternRule(
        "DEVOPS-SEC-ROOT-USER",
        matches(r"(?m)^[ \t]*USER[ \t]+(?:root|0)\b"),
        message="Container runs as root",
        suggestion="Run containers as an unprivileged user",
        delta=-20,
    ),
    PatternRule(
        "DEVOPS-SEC-NO-USER",
        all_of(matches(r"(?m)^[ \t]*FROM[ \t]+\S"), not_(matches(r"(?m)^[ \t]*USER[ \t]+\S"))),
        message="Dockerfile never drops root privileges",
        suggestion="Add a non-root USER instruction",
        delta=-15,
    ),
    PatternRule(
        "DEVOPS-SEC-PRIVILEGED",
        matches(r"privileged:[ \t]*true"),
        message="Privileged container",
        suggestion="Grant individual capabilities instead of privileged mode",
        delta=-25,
    ),
    PatternRule(
        "DEVOPS-SEC-NO-SECURITY-CONTEXT",
        all_of(contains("containers:"), lacks("securityContext")),
        suggestion="Define a securityContext that drops capabilities",
        delta=-8,
    ),
    PatternRule(
        "DEVOPS-SEC-CURL-PIPE-SHELL",
        matches(r"\b(?:curl|wget)\b[^|\n]{0,300}\|[ \t]*(?:sudo[ \t]+)?(?:ba)?sh\b"),
        message="Remote script piped into a shell",
        suggestion="Download, verify the checksum, then execute",
        delta=-15,
    ),
    PatternRule(
        "DEVOPS-SEC-OPEN-SSH",
        matches(r"from_port\s*=\s*22\b[^}]{0,300}0\.0\.0\.0/0"),
        message="SSH open to the internet",
        suggestion="Restrict SSH ingress to a bastion or VPN range",
        delta=-15,
    ),
    PatternRule(
        "DEVOPS-SEC-WORKFLOW-PERMISSIONS",
        all_of(contains("runs-on:"), lacks("permissions:")),
        suggestion="Restrict the workflow token with a permissions block",
        delta=-5,
    ),
    PatternRule("DEVOPS-SEC-NON-ROOT", contains_any("runAsNonRoot: true", 'user: "10001"'), delta=8),
    PatternRule("DEVOPS-SEC-IMAGE-SCAN", contains_any("trivy", "grype", "snyk", "npm audit"), delta=6),
    PatternRule("DEVOPS-SEC-ENCRYPTION", matches(r"\bencrypt(?:ed)?\s*=\s*true|\bkms_key\b"), delta=5),
]

MOBILE_SECURITY_RULES = [
    PatternRule(
        "MOBILE-SEC-API-KEY",
        matches(MOBILE_API_KEY),
        message="API key embedded in the app bundle",
        suggestion="Fetch keys from a backend or use platform key storage",
        delta=-25,
    ),
    PatternRule(
        "MOBILE-SEC-CLEARTEXT",
        matches(CLEARTEXT_URL),
        message="Cleartext HTTP traffic",
        suggestion="Use HTTPS for all network traffic",
        delta=-15,
    ),
    PatternRule(
        "MOBILE-SEC-INSECURE-STORAGE",
        all_of(contains_any("AsyncStorage", "SharedPreferences", "UserDefaults"), matches(r"(?i)token|password|secret")),
        message="Sensitive data in unencrypted storage",
        suggestion="Use Keychain, Keystore, expo-secure-store or flutter_secure_storage",
        delta=-20,
    ),
    PatternRule(
        "MOBILE-SEC-ARBITRARY-LOADS",
        contains_any("NSAllowsArbitraryLoads", 'usesCleartextTraffic="true"'),
        message="App transport security disabled",
        delta=-15,
    ),
    PatternRule(
        "MOBILE-SEC-WEBVIEW-JS",
        all_of(contains("WebView"), contains_any("javaScriptEnabled", "setJavaScriptEnabled(true)"), lacks("originWhitelist")),
        suggestion="Restrict WebView origins when JavaScript is enabled",
        delta=-5,
    ),
    PatternRule(
        "MOBILE-SEC-LOGGED-SECRETS",
        matches(r"(?i)\b(?:console\.log|print|NSLog|Log\.d)\([^)\n]{0,200}(?:token|password)"),
        message="Sensitive values written to device logs",
        delta=-10,
    ),
    PatternRule(
        "MOBILE-SEC-SECURE-STORAGE",
        contains_any("SecureStore", "Keychain", "flutter_secure_storage", "EncryptedSharedPreferences"),
        delta=10,
    ),
    PatternRule("MOBILE-SEC-HTTPS", all_of(contains("https://"), not_(matches(CLEARTEXT_URL))), delta=5),
]


def owasp_compliance(score: int, code: str, technology: str) -> Dict[str, Any]:
    if score >= 80:
        level = "High"
    elif score >= 60:
        level = "Medium"
    else:
        level = "Low"
    return {"compliance": {"standard": "OWASP Top 10 2021", "level": level}}
