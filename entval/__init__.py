"""entval - Schema-driven entity validation engine."""

__version__ = "0.1.0"

# Re-export the validation entry point for easy access
# Note: CLI components imported on-demand to avoid dependency issues
from .validation import ValidationError, ValidationResult, validate

__all__ = [
    "ValidationError",
    "ValidationResult",
    "__version__",
    "validate",
]
