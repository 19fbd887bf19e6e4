"""
Error taxonomy for codeintel.

Input problems are raised to the caller. Validation failures are data and
live in ValidationResult.errors; degraded Context7 input is only logged.

codeintel/src/codeintel/exceptions.py
"""

__all__ = [
    "CodeIntelError",
    "InputError",
    "UnsupportedCategoryError",
    "UnsupportedTechnologyError",
]


class CodeIntelError(Exception):
    """Base class for every error raised by codeintel."""


class InputError(CodeIntelError):
    """The caller supplied something the engines cannot act on."""


class UnsupportedCategoryError(InputError):
    """No engine is registered for the requested category."""

    def __init__(self, category: str, available: list[str] | None = None):
        self.category = category
        self.available = sorted(available or [])
        message = f"Unsupported category: {category!r}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class UnsupportedTechnologyError(InputError):
    """A technology dispatch table has no route and no fallback for a technology."""

    def __init__(self, technology: str, table: str = ""):
        self.technology = technology
        self.table = table
        where = f" in {table}" if table else ""
        super().__init__(f"No generator for technology {technology!r}{where}")
