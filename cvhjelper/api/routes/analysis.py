"""CV analysis endpoints."""

import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import StreamingResponse

from cvhjelper.agents.evaluation import (
    CHECKLIST_ANALYSIS_OPTIONS,
    run_checklist_analysis,
    run_cv_evaluation_agent,
    stream_summary_analysis,
)
from cvhjelper.agents.models import supports_structured_output
from cvhjelper.agents.pipelines import run_cv_analysis, run_quick_analysis
from cvhjelper.api.dependencies import ModelFactory, get_model_factory, read_pdf_text, select_model
from cvhjelper.api.errors import RequestLog
from cvhjelper.api.limiter import limiter
from cvhjelper.api.schemas import AnalysisResponse, DebugInfo, EvaluationResponse, TextResultResponse
from cvhjelper.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

ANALYSIS_TYPES = ("summary", "assignments")


@router.post("/analyze-cv", response_model=TextResultResponse)
@limiter.limit(settings.analysis_rate_limit)
async def analyze_cv(
    request: Request,
    file: UploadFile | None = File(None),
    checklist_text: str | None = Form(None, alias="checklistText"),
    analysis_type: str | None = Form(None, alias="analysisType"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """Markdown analysis of the CV summary or key assignments against a checklist."""
    log = RequestLog(__name__)
    if file is None or not checklist_text:
        raise log.error(400, "Missing required parameters", timed=False)

    analysis_type = analysis_type or "assignments"
    if analysis_type not in ANALYSIS_TYPES:
        raise log.error(400, f"Invalid analysis type: {analysis_type}", timed=False)

    _, model = select_model(
        model_factory, model_provider, model_name, log, **CHECKLIST_ANALYSIS_OPTIONS
    )
    cv_text = await read_pdf_text(file, log)

    try:
        text = await run_checklist_analysis(model, cv_text, checklist_text, analysis_type)
    except Exception as e:
        raise log.error(500, "Error processing CV analysis", str(e)) from e

    return TextResultResponse(result=text)


@router.post("/agent-cv-evaluation", response_model=EvaluationResponse)
@limiter.limit(settings.analysis_rate_limit)
async def agent_cv_evaluation(
    request: Request,
    file: UploadFile | None = File(None),
    checklist_text: str | None = Form(None, alias="checklistText"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """Single-call evaluation against the five evaluation criteria."""
    log = RequestLog(__name__)
    if file is None or not checklist_text:
        raise log.error(400, "Missing required parameters", timed=False)

    provider, model = select_model(model_factory, model_provider, model_name, log)
    cv_text = await read_pdf_text(file, log)

    try:
        evaluation, is_structured = await run_cv_evaluation_agent(
            model, cv_text, checklist_text, structured=supports_structured_output(provider)
        )
    except Exception as e:
        raise log.error(500, "Error processing CV evaluation", str(e)) from e

    result = evaluation.model_dump() if is_structured else evaluation
    return EvaluationResponse(result=result, isStructured=is_structured)


async def _run_analysis(
    quick: bool,
    file: UploadFile | None,
    summary_checklist: str | None,
    assignments_checklist: str | None,
    model_provider: str | None,
    model_name: str | None,
    model_factory: ModelFactory,
) -> AnalysisResponse:
    log = RequestLog(__name__)
    log("Starting quick CV analysis" if quick else "Starting CV analysis agent")

    if file is None or not summary_checklist or not assignments_checklist:
        raise log.error(400, "Missing required parameters", timed=False)

    _, model = select_model(model_factory, model_provider, model_name, log)
    cv_text = await read_pdf_text(file, log)

    try:
        if quick:
            result = await run_quick_analysis(model, cv_text)
        else:
            result = await run_cv_analysis(model, cv_text, summary_checklist, assignments_checklist)
    except Exception as e:
        raise log.error(500, "Error communicating with AI model API", str(e)) from e

    log(f"Analysis completed with overall score {result['overall_score']}")
    return AnalysisResponse(
        result=result,
        isStructured=True,
        debug=DebugInfo(logs=log.entries),
        timeTaken=log.elapsed(),
    )


@router.post("/cv-analysis-agent", response_model=AnalysisResponse)
@limiter.limit(settings.analysis_rate_limit)
async def cv_analysis_agent(
    request: Request,
    file: UploadFile | None = File(None),
    summary_checklist: str | None = Form(None, alias="summaryChecklistText"),
    assignments_checklist: str | None = Form(None, alias="assignmentsChecklistText"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """Five analysis agents in parallel, merged into one scored result."""
    return await _run_analysis(
        False, file, summary_checklist, assignments_checklist, model_provider, model_name, model_factory
    )


@router.post("/cv-analysis-agent/quick", response_model=AnalysisResponse)
@limiter.limit(settings.analysis_rate_limit)
async def cv_analysis_agent_quick(
    request: Request,
    file: UploadFile | None = File(None),
    summary_checklist: str | None = Form(None, alias="summaryChecklistText"),
    assignments_checklist: str | None = Form(None, alias="assignmentsChecklistText"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """Language quality only, for a fast first look."""
    return await _run_analysis(
        True, file, summary_checklist, assignments_checklist, model_provider, model_name, model_factory
    )


@router.post("/stream-cv-analysis")
@limiter.limit(settings.analysis_rate_limit)
async def stream_cv_analysis(
    request: Request,
    file: UploadFile | None = File(None),
    summary_checklist: str | None = Form(None, alias="summaryChecklistText"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """Stream the summary analysis JSON as plain text while it is generated."""
    log = RequestLog(__name__)
    if file is None:
        raise log.error(400, "Missing required file", timed=False)
    if not summary_checklist:
        raise log.error(400, "Missing summary checklist text", timed=False)

    _, model = select_model(model_factory, model_provider, model_name, log)
    cv_text = await read_pdf_text(file, log)

    async def text_generator() -> AsyncGenerator[str, None]:
        try:
            async for chunk in stream_summary_analysis(model, cv_text, summary_checklist):
                yield chunk
        except Exception as e:
            # Headers are already sent, so the stream just ends early
            logger.error(f"Streaming summary analysis failed: {e}")

    return StreamingResponse(
        text_generator(),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
