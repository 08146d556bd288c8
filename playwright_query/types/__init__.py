"""Type definitions for PlaywrightQuery."""

from .models import (
    ResolutionState,
    FieldFillResult,
    FillResult,
    InitResult,
    ConstructorParams,
)

__all__ = [
    "ResolutionState",
    "FieldFillResult",
    "FillResult",
    "InitResult",
    "ConstructorParams",
]
