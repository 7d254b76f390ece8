"""component-validator - Validates Tekton and supply-chain component manifests.

component-validator checks Task, Pipeline and Component manifests against
per-kind rules and reports every violation of a multi-document file at once.
"""

__version__ = "0.1.0"
__description__ = "Validates Tekton tasks, pipelines and supply-chain components"

from component_validator.config import ValidatorConfig
from component_validator.validation import ValidationFramework, ValidationResult

__all__ = [
    "__version__",
    "__description__",
    "ValidatorConfig",
    "ValidationFramework",
    "ValidationResult",
]
