"""Diagnostics endpoints for checking deployment configuration."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from cvhjelper.agents.llm import generate_text
from cvhjelper.api.dependencies import ModelFactory, get_model_factory, select_model
from cvhjelper.api.errors import RequestLog
from cvhjelper.api.schemas import ChatRequest, ChatResponse, EnvironmentResponse
from cvhjelper.config import settings

router = APIRouter()

DEFAULT_CHAT_MESSAGE = "Hello! This is a test message."


@router.get("/env", response_model=EnvironmentResponse)
def environment_info():
    """Non-sensitive configuration: which keys are set, never their values."""
    return EnvironmentResponse(
        openaiKeyExists=bool(settings.openai_api_key),
        anthropicKeyExists=bool(settings.anthropic_api_key),
        deepseekKeyExists=bool(settings.deepseek_api_key),
        mistralKeyExists=bool(settings.mistral_api_key),
        googleKeyExists=bool(settings.google_api_key),
        defaultProvider=settings.default_provider,
        defaultModel=settings.default_model,
        llmTimeout=settings.llm_timeout,
        maxUploadSize=settings.max_upload_size,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.post("/chat", response_model=ChatResponse)
async def simple_chat(data: ChatRequest, model_factory: ModelFactory = Depends(get_model_factory)):
    """Round-trip a short message through the default model."""
    log = RequestLog(__name__)
    _, model = select_model(
        model_factory, settings.default_provider, settings.default_model, log, max_tokens=100
    )

    try:
        response = await generate_text(
            model, "You are a helpful assistant.", data.message or DEFAULT_CHAT_MESSAGE
        )
    except Exception as e:
        raise log.error(500, "Error processing chat request", str(e)) from e

    return ChatResponse(response=response, timeTaken=log.elapsed())
