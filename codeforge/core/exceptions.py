"""
Core Exceptions

Custom exceptions for the code generation core.
"""


class CodeForgeError(Exception):
    """Base class for all codeforge errors."""

    def __init__(self, message: str = "Code generation failed"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(CodeForgeError):
    """
    Raised when no credential is configured for the selected provider.

    Always surfaced to the caller; the orchestrator never recovers from it.
    """

    def __init__(self, provider: str, message: str | None = None):
        self.provider = provider
        super().__init__(
            message
            or f"No API key configured for {provider}. Please configure your API keys in Settings."
        )


class ProviderError(CodeForgeError):
    """
    Raised by provider adapters on a failed vendor call.

    Carries the HTTP status (when there was a response) and the vendor's
    status text or error message.
    """

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        prefix = f"{provider} error"
        if status_code is not None:
            prefix = f"{prefix} ({status_code})"
        super().__init__(f"{prefix}: {message}")


class GenerationCancelledError(CodeForgeError):
    """Raised when a generation is aborted through its cancellation token."""

    def __init__(self, message: str = "Generation cancelled"):
        super().__init__(message)
