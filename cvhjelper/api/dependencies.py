"""Shared request helpers: model selection and PDF uploads."""

from typing import Callable

from fastapi import UploadFile
from langchain_core.language_models.chat_models import BaseChatModel

from cvhjelper.agents.models import create_chat_model, resolve_provider
from cvhjelper.api.errors import RequestLog
from cvhjelper.config import settings
from cvhjelper.exceptions import PDFParseError, ProviderError
from cvhjelper.tools.pdf_parser import parse_pdf

ModelFactory = Callable[..., BaseChatModel]


def get_model_factory() -> ModelFactory:
    """Dependency returning the chat model factory (overridden in tests)."""
    return create_chat_model


def select_model(
    factory: ModelFactory,
    provider: str | None,
    model_name: str | None,
    log: RequestLog,
    **kwargs,
) -> tuple[str, BaseChatModel]:
    """Validate the provider and build its model; unsupported or unconfigured providers are a 400."""
    try:
        name = resolve_provider(provider)
    except ProviderError as e:
        raise log.error(400, str(e)) from e

    log(f"Provider {name} is available")
    try:
        model = factory(name, model_name, **kwargs)
    except ProviderError as e:
        raise log.error(400, str(e)) from e
    except Exception as e:
        raise log.error(500, "Failed to configure model provider", str(e)) from e
    return name, model


async def read_upload(upload: UploadFile, log: RequestLog) -> tuple[str, bytes]:
    """Read an uploaded PDF, enforcing the file type and size limit."""
    filename = upload.filename or ""
    if not filename.lower().endswith(".pdf"):
        raise log.error(400, "Only PDF files are supported", filename or None)

    content = await upload.read()
    if len(content) > settings.max_upload_size:
        raise log.error(413, f"File too large. Maximum size is {settings.max_upload_size // (1024 * 1024)} MB")

    log(f"Read {filename}", {"size": len(content)})
    return filename, content


def extract_text(filename: str, content: bytes, log: RequestLog) -> str:
    """Extract PDF text; unreadable or empty PDFs are a 400."""
    try:
        text = parse_pdf(content)
    except PDFParseError as e:
        raise log.error(400, "Failed to parse PDF", str(e)) from e

    if not text.strip():
        raise log.error(400, "PDF appears to be empty or unreadable", filename)

    log(f"Extracted text from {filename}", {"characters": len(text)})
    return text


async def read_pdf_text(upload: UploadFile, log: RequestLog) -> str:
    filename, content = await read_upload(upload, log)
    return extract_text(filename, content, log)
