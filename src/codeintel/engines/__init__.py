"""
Category engines.

codeintel/src/codeintel/engines/__init__.py
"""

from .backend import BackendEngine
from .base import AnalyzerSpec, BaseCategoryEngine, ValidationCheck
from .database import DatabaseEngine
from .devops import DevOpsEngine
from .dispatch import TechnologyDispatch, TechnologyRoute
from .frontend import FrontendEngine
from .mobile import MobileEngine

__all__ = [
    "AnalyzerSpec",
    "BaseCategoryEngine",
    "ValidationCheck",
    "TechnologyDispatch",
    "TechnologyRoute",
    "DatabaseEngine",
    "BackendEngine",
    "FrontendEngine",
    "DevOpsEngine",
    "MobileEngine",
    "BUILTIN_ENGINES",
]

BUILTIN_ENGINES = {
    DatabaseEngine.category: DatabaseEngine,
    BackendEngine.category: BackendEngine,
    FrontendEngine.category: FrontendEngine,
    DevOpsEngine.category: DevOpsEngine,
    MobileEngine.category: MobileEngine,
}
