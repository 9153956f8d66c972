"""
Back Office API - Template Library Routes
==========================================

What:  Read-only questionnaire template previews for the template library.
"""

from fastapi import APIRouter, Query

from app.schemas.template import TemplateListResponse, TemplatePreview
from app.services.template_library import get_template_preview, list_template_titles

router = APIRouter(prefix="/api/templates", tags=["Templates"])


@router.get("", response_model=TemplateListResponse, summary="List built-in templates")
async def list_templates() -> TemplateListResponse:
    return TemplateListResponse(titles=list_template_titles())


@router.get(
    "/preview",
    response_model=TemplatePreview,
    summary="Preview a questionnaire template",
    description="Unknown titles return a placeholder preview rather than 404.",
)
async def preview_template(
    title: str = Query(..., min_length=1, description="Full template title"),
) -> TemplatePreview:
    return get_template_preview(title)
