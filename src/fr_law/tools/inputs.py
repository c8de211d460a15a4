from typing import Literal, Optional
from pydantic import BaseModel, Field

from fr_law.search.legislation import DEFAULT_STANCE_LIMIT


class ToolInput(BaseModel):
    """Base for tool argument models; unknown keys are ignored."""


class SearchLegislationInput(ToolInput):
    query: str = Field(
        min_length=1, max_length=1000,
        description='Search query in French. Supports FTS5 syntax: AND, OR, NOT, "exact phrase", prefix*.',
    )
    document_id: Optional[str] = Field(
        default=None, max_length=200,
        description='Restrict to one statute (slug such as "code-penal", LEGI id, or title).',
    )
    status: Optional[Literal['in_force', 'amended', 'repealed', 'not_yet_in_force']] = Field(
        default=None, description='Filter by document status.',
    )
    # Clamped to 1..50 downstream; out-of-range values are not rejected.
    limit: Optional[int] = Field(default=None, description='Maximum results. Default 10, maximum 50.')


class GetProvisionInput(ToolInput):
    document_id: str = Field(min_length=1, max_length=200, description='Statute identifier or French title.')
    section: Optional[str] = Field(default=None, max_length=100, description='Article number, e.g. "323-1", "L2321-1".')
    provision_ref: Optional[str] = Field(
        default=None, max_length=100,
        description='Direct provision reference, e.g. "art323-1". Takes precedence over section.',
    )


class ListSourcesInput(ToolInput):
    pass


class ValidateCitationInput(ToolInput):
    citation: str = Field(
        min_length=1, max_length=1000,
        description='Citation to validate, e.g. "Code de la défense, art. L. 2321-1".',
    )


class BuildLegalStanceInput(ToolInput):
    query: str = Field(min_length=1, max_length=1000, description='Legal question or topic in French.')
    document_id: Optional[str] = Field(default=None, max_length=200, description='Optionally limit to one statute.')
    limit: int = Field(default=DEFAULT_STANCE_LIMIT, description='Max results per strategy. Default 5, maximum 20.')


class FormatCitationInput(ToolInput):
    citation: str = Field(min_length=1, max_length=1000, description='Citation string to format.')
    format: Literal['full', 'short', 'pinpoint'] = Field(default='full', description='Output style.')


class CheckCurrencyInput(ToolInput):
    document_id: str = Field(min_length=1, max_length=200, description='Statute identifier or French title.')
    provision_ref: Optional[str] = Field(default=None, max_length=100, description='Optional provision, e.g. "art323-1".')


class AboutInput(ToolInput):
    pass
