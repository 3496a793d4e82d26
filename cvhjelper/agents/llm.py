"""
Thin wrappers around LangChain chat models.

Every agent talks to the model through these helpers: a system prompt plus a
single user message, answered either as a validated pydantic object, as
plain text, or as a stream of text chunks.
"""

from typing import AsyncIterator, TypeVar

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel

SchemaT = TypeVar("SchemaT", bound=BaseModel)

LANGUAGE_INSTRUCTION = (
    "IMPORTANT: Provide all analysis, feedback, and suggestions in {language} "
    "language to match the language of the CV."
)


def language_instruction(language: str) -> str:
    return LANGUAGE_INSTRUCTION.format(language=language)


def with_document(prompt: str, document: str, title: str = "CV") -> str:
    """Append extracted document text to a user prompt."""
    return f"{prompt}\n\n--- {title} ---\n{document}\n--- END {title} ---"


def build_messages(system: str, prompt: str) -> list[BaseMessage]:
    return [SystemMessage(content=system), HumanMessage(content=prompt)]


def message_text(message: BaseMessage | str) -> str:
    """Flatten message content (string or content blocks) to text."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


async def generate_object(
    model: BaseChatModel,
    schema: type[SchemaT],
    system: str,
    prompt: str,
) -> SchemaT:
    """Ask the model for an object matching ``schema``."""
    structured = model.with_structured_output(schema)
    result = await structured.ainvoke(build_messages(system, prompt))
    if isinstance(result, dict):
        return schema.model_validate(result)
    return result


async def generate_text(model: BaseChatModel, system: str, prompt: str) -> str:
    response = await model.ainvoke(build_messages(system, prompt))
    return message_text(response)


async def stream_text(model: BaseChatModel, system: str, prompt: str) -> AsyncIterator[str]:
    """Yield text chunks as the model produces them."""
    async for chunk in model.astream(build_messages(system, prompt)):
        text = message_text(chunk)
        if text:
            yield text
