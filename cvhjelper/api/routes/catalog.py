"""Checklists and model options offered to the client."""

from fastapi import APIRouter

from cvhjelper.agents.checklists import ASSIGNMENTS_CHECKLISTS, SUMMARY_CHECKLISTS
from cvhjelper.agents.models import MODEL_OPTIONS, is_provider_available
from cvhjelper.api.schemas import ChecklistsResponse, ModelOptionResponse

router = APIRouter()


@router.get("/checklists", response_model=ChecklistsResponse)
def get_checklists():
    """Built-in summary and assignments checklists."""
    return ChecklistsResponse(summary=SUMMARY_CHECKLISTS, assignments=ASSIGNMENTS_CHECKLISTS)


@router.get("/models", response_model=list[ModelOptionResponse])
def get_models(pdf_only: bool = False):
    """Model options, optionally limited to models that accept CV documents."""
    options = [o for o in MODEL_OPTIONS if o["supportsPDF"]] if pdf_only else MODEL_OPTIONS
    return [
        ModelOptionResponse(**option, available=is_provider_available(option["provider"]))
        for option in options
    ]
