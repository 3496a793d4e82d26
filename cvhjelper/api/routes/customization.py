"""CV customization endpoints: one-shot JSON and a server-sent-event stream."""

import asyncio
import json
import logging
from typing import Any, AsyncGenerator

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import StreamingResponse

from cvhjelper.agents.pipelines import run_customization
from cvhjelper.agents.schemas import ProgressUpdate
from cvhjelper.api.dependencies import (
    ModelFactory,
    extract_text,
    get_model_factory,
    read_pdf_text,
    read_upload,
    select_model,
)
from cvhjelper.api.errors import APIError, RequestLog
from cvhjelper.api.limiter import limiter
from cvhjelper.api.schemas import CustomizationResponse
from cvhjelper.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _sse_data(data: dict) -> str:
    """Format an unnamed SSE event."""
    return f"data: {json.dumps(data, default=str)}\n\n"


def _progress(step: str, status: str, message: str, data: Any = None, progress: int = 0) -> str:
    return _sse_data(
        ProgressUpdate(step=step, status=status, message=message, data=data, progress=progress).model_dump()
    )


@router.post("", response_model=CustomizationResponse)
@limiter.limit(settings.customization_rate_limit)
async def customize_cv(
    request: Request,
    cv_file: UploadFile | None = File(None, alias="cvFile"),
    customer_files: list[UploadFile] | None = File(None, alias="customerFiles"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """Tailor a CV to customer documents and return the complete result."""
    log = RequestLog(__name__)
    log("Starting CV customization agent")

    if cv_file is None or not customer_files:
        raise log.error(400, "Missing required parameters (CV file or customer files)", timed=False)

    _, model = select_model(model_factory, model_provider, model_name, log)

    cv_text = await read_pdf_text(cv_file, log)
    customer_documents = []
    for upload in customer_files:
        customer_documents.append((upload.filename, await read_pdf_text(upload, log)))
    log(f"Processed {len(customer_documents)} customer files and CV")

    try:
        result = await run_customization(model, cv_text, customer_documents)
    except Exception as e:
        raise log.error(500, "Error during CV customization", str(e)) from e

    log(f"CV customization completed with overall score {result.evaluation.overall_score}/10")
    return CustomizationResponse(result=result.model_dump(), logs=log.entries, timeTaken=log.elapsed())


@router.post("/stream")
@limiter.limit(settings.customization_rate_limit)
async def customize_cv_stream(
    request: Request,
    cv_file: UploadFile | None = File(None, alias="cvFile"),
    customer_files: list[UploadFile] | None = File(None, alias="customerFiles"),
    model_provider: str | None = Form(None, alias="modelProvider"),
    model_name: str | None = Form(None, alias="modelName"),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """
    Stream customization progress as SSE.

    The first frame is a connection notice; every following frame is a
    ProgressUpdate. The stream ends with a "complete" frame carrying the full
    result, or an "error" frame.
    """
    log = RequestLog(__name__)
    log("Starting CV customization agent")

    # Uploads are read before streaming starts; the form is closed afterwards
    cv_upload = None
    customer_uploads = []
    read_error = None
    try:
        if cv_file is not None:
            cv_upload = await read_upload(cv_file, log)
        for upload in customer_files or []:
            customer_uploads.append(await read_upload(upload, log))
    except APIError as e:
        read_error = e

    async def event_generator() -> AsyncGenerator[str, None]:
        yield _sse_data({"type": "connected", "message": "Starting CV customization process"})
        yield _progress("validation", "starting", "Validating input parameters...", progress=5)

        if cv_file is None or not customer_files:
            yield _progress("validation", "error", "Missing required parameters (CV file or customer files)")
            return
        if read_error is not None:
            yield _progress("validation", "error", read_error.error)
            return
        try:
            _, model = select_model(model_factory, model_provider, model_name, log)
        except APIError as e:
            yield _progress("validation", "error", e.error)
            return
        yield _progress("validation", "completed", "Input validation completed successfully", progress=10)

        yield _progress("file_processing", "starting", "Processing CV and customer files...", progress=15)
        try:
            cv_text = extract_text(*cv_upload, log)
            customer_documents = [(name, extract_text(name, content, log)) for name, content in customer_uploads]
        except APIError as e:
            yield _progress("file_processing", "error", e.error, {"details": e.details})
            return
        yield _progress(
            "file_processing",
            "completed",
            f"Successfully processed {len(customer_documents)} customer files and CV",
            progress=20,
        )

        queue: asyncio.Queue[ProgressUpdate | None] = asyncio.Queue()

        async def on_progress(update: ProgressUpdate) -> None:
            await queue.put(update)

        async def run() -> None:
            try:
                await run_customization(model, cv_text, customer_documents, on_progress=on_progress, validate=True)
            finally:
                await queue.put(None)

        task = asyncio.create_task(run())
        try:
            while True:
                update = await queue.get()
                if update is None:
                    break
                yield _sse_data(update.model_dump())
            await task
            log("CV customization completed")
        except Exception as e:
            log(f"Error during CV customization: {e}")
            logger.exception("CV customization stream failed")
            yield _progress(
                "error",
                "error",
                str(e) or "Unknown error during customization",
                {"logs": log.entries, "timeTaken": log.elapsed()},
            )
        finally:
            if not task.done():
                task.cancel()

    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=SSE_HEADERS)
