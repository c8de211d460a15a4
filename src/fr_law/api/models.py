from typing import Literal, Optional
from pydantic import BaseModel, Field

from fr_law.tools.inputs import SearchLegislationInput


class SearchRequest(SearchLegislationInput):
    """Body of POST /api/search; same fields as the search_legislation tool."""


class CitationRequest(BaseModel):
    citation: str = Field(min_length=1, max_length=1000)


class FormatRequest(CitationRequest):
    format: Literal['full', 'short', 'pinpoint'] = 'full'


class CurrencyQuery(BaseModel):
    provision_ref: Optional[str] = Field(default=None, max_length=100)
