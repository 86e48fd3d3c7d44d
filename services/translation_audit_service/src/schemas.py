import json
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

def as_text(value: Any) -> str:
    """Coerce an untrusted model value into cell text ("" for missing/null)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)

class AuditRequest(BaseModel):
    src: str = Field(..., min_length=1, description="Source text; paragraphs separated by blank lines")
    tgt: str = Field(..., min_length=1, description="Translation of the source text")
    style: Optional[str] = Field(default=None, description="Style guide replacing the default one")

class AuditResponse(BaseModel):
    html: str = Field(..., description="Ready-to-embed HTML fragment with the audit report")

class ErrorResponse(BaseModel):
    error: str

class AuditRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: str = ""
    source: str = ""
    translation: str = ""
    issues: str = ""
    fix: str = ""
    # "Accuracy/Idiomaticity/Consistency", e.g. "5/4/5"
    score: str = ""
    # minor | moderate | critical
    severity: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return as_text(v)

class AuditReport(BaseModel):
    """
    Parsed model reply. The document comes from an external model, so every
    field is coerced rather than validated: non-list rows/rules become empty,
    non-object rows become empty rows (keeping row count and order).
    """
    model_config = ConfigDict(extra="ignore")

    rows: List[AuditRow] = Field(default_factory=list)
    summary: str = ""
    rules: List[str] = Field(default_factory=list)

    @field_validator("rows", mode="before")
    @classmethod
    def _coerce_rows(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            return []
        return [item if isinstance(item, dict) else {} for item in v]

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_summary(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("rules", mode="before")
    @classmethod
    def _coerce_rules(cls, v: Any) -> List[str]:
        if not isinstance(v, list):
            return []
        return [as_text(item) for item in v]
