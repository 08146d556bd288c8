"""Core type definitions for PlaywrightQuery."""

from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field
from enum import Enum


class ResolutionState(str, Enum):
    """Resolution state of an ElementSelector."""
    UNRESOLVED = "unresolved"
    FOUND = "found"
    ABSENT = "absent"


class FieldFillResult(BaseModel):
    """Outcome of filling a single named form field."""
    field: str
    selector: str
    filled: bool
    error: Optional[str] = None


class FillResult(BaseModel):
    """Outcome of QueryPage.fill_form()."""
    container: str
    fields: List[FieldFillResult] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when every field was found and filled."""
        return all(f.filled for f in self.fields)

    @property
    def missing(self) -> List[str]:
        """Names of fields that matched no element."""
        return [f.field for f in self.fields if not f.filled]


class InitResult(BaseModel):
    """Result from PlaywrightQuery initialization."""
    session_id: str
    browser: str
    headless: bool
    context_id: Optional[str] = None


class ConstructorParams(BaseModel):
    """Parameters for PlaywrightQuery constructor."""
    verbose: int = Field(default=0, ge=0, le=3)
    headless: bool = True
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    browser_args: List[str] = Field(default_factory=list)
    context_options: Dict[str, Any] = Field(default_factory=dict)
