"""codeintel: Category Intelligence Engine

Rule-based, multi-dimensional code analysis and technology-aware code
generation for database, backend, frontend, DevOps and mobile code.
"""

from codeintel.config import Config, load_config
from codeintel.dispatcher import DispatcherState, UnifiedDispatcher
from codeintel.engines import (
    BackendEngine,
    BaseCategoryEngine,
    DatabaseEngine,
    DevOpsEngine,
    FrontendEngine,
    MobileEngine,
)
from codeintel.exceptions import (
    CodeIntelError,
    InputError,
    UnsupportedCategoryError,
    UnsupportedTechnologyError,
)
from codeintel.models import CodeGenerationRequest, Context7Data, QualityTier
from codeintel.rules import RuleEngine
from codeintel.types import CodeAnalysis, DimensionResult, Finding, TechnologyInsights, ValidationResult

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "Config",
    "load_config",
    "RuleEngine",
    # Dispatching
    "UnifiedDispatcher",
    "DispatcherState",
    # Engines
    "BaseCategoryEngine",
    "DatabaseEngine",
    "BackendEngine",
    "FrontendEngine",
    "DevOpsEngine",
    "MobileEngine",
    # Models and results
    "CodeGenerationRequest",
    "Context7Data",
    "QualityTier",
    "CodeAnalysis",
    "DimensionResult",
    "Finding",
    "TechnologyInsights",
    "ValidationResult",
    # Errors
    "CodeIntelError",
    "InputError",
    "UnsupportedCategoryError",
    "UnsupportedTechnologyError",
]
