"""
codeforge

AI code-generation orchestration core: model selection, prompt composition,
provider adapters with streaming, and deterministic fallback output.
"""

from codeforge.core.cancellation import CancellationToken
from codeforge.core.exceptions import (
    CodeForgeError,
    ConfigurationError,
    GenerationCancelledError,
    ProviderError,
)
from codeforge.models.contracts.generation import (
    CodeGenerationRequest,
    CodeGenerationResult,
    GenerationOptions,
    ProjectComplexity,
    StreamingProgressEvent,
)
from codeforge.models.enums import ComplexityTier, Provider
from codeforge.services.credential_store import CredentialStore
from codeforge.services.generation_service import CodeGenerationService

__all__ = [
    "CancellationToken",
    "CodeForgeError",
    "CodeGenerationRequest",
    "CodeGenerationResult",
    "CodeGenerationService",
    "ComplexityTier",
    "ConfigurationError",
    "CredentialStore",
    "GenerationCancelledError",
    "GenerationOptions",
    "ProjectComplexity",
    "Provider",
    "ProviderError",
    "StreamingProgressEvent",
]

__version__ = "0.1.0"
