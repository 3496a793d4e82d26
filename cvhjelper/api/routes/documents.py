"""PDF text extraction endpoint."""

from fastapi import APIRouter, File, UploadFile

from cvhjelper.api.dependencies import read_pdf_text
from cvhjelper.api.errors import RequestLog
from cvhjelper.api.schemas import ParsedPDFResponse

router = APIRouter()


@router.post("/parse-pdf", response_model=ParsedPDFResponse)
async def parse_pdf(file: UploadFile | None = File(None)):
    """Return the text of an uploaded PDF."""
    log = RequestLog(__name__)
    if file is None:
        raise log.error(400, "No file provided", timed=False)

    return ParsedPDFResponse(text=await read_pdf_text(file, log))
