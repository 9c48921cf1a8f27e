# src/core/models.py — v3
"""Shared Pydantic domain models used across modules.

Feature results are serialized with camelCase aliases (the wire format the
web client consumes) and accept either spelling on input. No module
redefines these types; all imports come from core.models.

Model output often carries numbers where a string is expected (a case year,
a risk severity); those are converted to strings rather than rejected.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Base for models exchanged with the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


# === LEGAL RESEARCH ===


class LawReference(_WireModel):
    """Statute or regulation relevant to a research query."""

    title: str = ""
    description: str = ""
    source: str = ""
    url: str | None = None
    relevance_score: float | None = None


class CaseReference(_WireModel):
    """Case law relevant to a research query."""

    name: str = ""
    citation: str = ""
    relevance: str = ""
    year: str | None = None
    jurisdiction: str | None = None
    judgment: str | None = None
    key_points: list[str] | None = None
    url: str | None = None


class LegalConcept(_WireModel):
    concept: str = ""
    definition: str = ""
    relevance: str = ""


class ResearchResult(_WireModel):
    """Common research result shape, whichever provider produced it."""

    relevant_laws: list[LawReference] = Field(default_factory=list)
    relevant_cases: list[CaseReference] = Field(default_factory=list)
    summary: str = ""
    legal_concepts: list[LegalConcept] | None = None


# === CONTRACT ANALYSIS ===


class ContractRisk(_WireModel):
    description: str = ""
    severity: str = "Medium"
    recommendation: str = ""


class ContractSuggestion(_WireModel):
    clause: str = ""
    improvement: str = ""


class ContractAnalysisResult(_WireModel):
    """Risks, suggestions and overall assessment of one contract."""

    risks: list[ContractRisk] = Field(default_factory=list)
    suggestions: list[ContractSuggestion] = Field(default_factory=list)
    summary: str = ""
    score: float | None = None
    risk_level: str | None = None
    clause_categories: dict[str, list[str]] | None = None


class ContractDifference(_WireModel):
    section: str = ""
    first_contract_text: str = ""
    second_contract_text: str = ""
    impact: str = ""
    recommendation: str = ""


class ContractComparisonResult(_WireModel):
    differences: list[ContractDifference] = Field(default_factory=list)
    summary: str = ""


# === DOCUMENT ENHANCEMENT ===


class DocumentEnhancement(_WireModel):
    """Enhanced document text, or the original with an explanation."""

    content: str
    enhanced: bool = True
    notice: str | None = None


# === DEGRADED RESPONSES ===


class DegradedResponse(_WireModel):
    """Structured apology returned when every provider failed."""

    error: Literal[True] = True
    error_type: Literal["token_limit", "rate_limit", "auth_error", "general_error"]
    fallback: Literal[True] = True
    message: str
