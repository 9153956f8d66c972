"""
Back Office API - Template Library Schemas
===========================================

What:  Preview payload for a questionnaire template (GET /api/templates/preview).
"""

from typing import List

from pydantic import BaseModel, Field


class TemplateQuestion(BaseModel):
    number: int = Field(description="1-based position within its section")
    text: str
    required: bool = True


class TemplateSection(BaseModel):
    title: str
    questions: List[TemplateQuestion]


class TemplatePreview(BaseModel):
    """
    What:  Everything the preview dialog renders for one template.

    `options` is the shared answer scale for every question; it is empty
    for templates without one (the placeholder preview).
    """
    title: str = Field(description="Full template title")
    display_title: str = Field(description="Title up to the first ' ('")
    sections: List[TemplateSection]
    options: List[str] = Field(default_factory=list)
    required_marker_note: str


class TemplateListResponse(BaseModel):
    titles: List[str]
