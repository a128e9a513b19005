"""
Domain models — Pydantic types for the wrapper step.

    from wrapper_step.core.models import StepConfig, CommandResult
"""

from wrapper_step.core.models.command import CommandResult
from wrapper_step.core.models.config import GenerationMode, StepConfig

__all__ = [
    "CommandResult",
    "GenerationMode",
    "StepConfig",
]
