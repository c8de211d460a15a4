"""Seed file schemas for the statute database build.

One JSON seed file describes one document (code or standalone law) together
with its provisions, as produced by the upstream LEGI ingestion.
"""
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

DocumentStatus = Literal['in_force', 'amended', 'repealed', 'not_yet_in_force']

class ProvisionSeed(BaseModel):
    provision_ref: Optional[str] = None  # derived from section when absent
    chapter: Optional[str] = None
    section: str = Field(min_length=1)
    title: Optional[str] = None
    content: str
    valid_from: Optional[str] = None
    valid_to: Optional[str] = None

class DocumentSeed(BaseModel):
    id: str = Field(min_length=1)
    type: Literal['statute'] = 'statute'
    title: str = Field(min_length=1)
    title_en: Optional[str] = None
    short_name: Optional[str] = None
    status: DocumentStatus = 'in_force'
    issued_date: Optional[str] = None
    in_force_date: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    provisions: List[ProvisionSeed] = Field(default_factory=list)

__all__ = ['DocumentStatus', 'ProvisionSeed', 'DocumentSeed']
