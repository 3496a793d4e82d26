"""API request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field


# Catalog schemas
class ChecklistResponse(BaseModel):
    id: str
    name: str
    content: str


class ChecklistsResponse(BaseModel):
    summary: list[ChecklistResponse]
    assignments: list[ChecklistResponse]


class ModelOptionResponse(BaseModel):
    provider: str
    model: str
    displayName: str
    supportsPDF: bool
    available: bool = False


# Analysis schemas
class TextResultResponse(BaseModel):
    result: str


class EvaluationResponse(BaseModel):
    result: dict[str, Any] | str
    isStructured: bool


class DebugInfo(BaseModel):
    logs: list[str]


class AnalysisResponse(BaseModel):
    result: dict[str, Any]
    isStructured: bool = True
    debug: DebugInfo
    timeTaken: str


class CustomizationResponse(BaseModel):
    result: dict[str, Any]
    logs: list[str]
    timeTaken: str


class ParsedPDFResponse(BaseModel):
    text: str


# Diagnostics schemas
class ChatRequest(BaseModel):
    message: str = Field(default="", max_length=10000)


class ChatResponse(BaseModel):
    response: str
    timeTaken: str


class EnvironmentResponse(BaseModel):
    openaiKeyExists: bool
    anthropicKeyExists: bool
    deepseekKeyExists: bool
    mistralKeyExists: bool
    googleKeyExists: bool
    defaultProvider: str
    defaultModel: str
    llmTimeout: float
    maxUploadSize: int
    timestamp: str
