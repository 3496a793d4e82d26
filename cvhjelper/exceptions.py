class AgentError(RuntimeError):
    """Raised when an agent's LLM call fails or returns unusable output"""


class ProviderError(RuntimeError):
    """Raised when a model provider is unsupported or not configured"""


class InputError(ValueError):
    """Raised when request input is missing or invalid"""


class PDFParseError(InputError):
    """Raised when a PDF cannot be read or contains no text"""
