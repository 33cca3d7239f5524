"""
Code Generation Pydantic Models

Request, option, progress-event and result models shared by the orchestrator,
the provider adapters and callers.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from codeforge.models.enums import ComplexityTier, FileKind


class ProjectComplexity(BaseModel):
    """Caller's estimate of how large and involved the requested project is."""

    model_config = ConfigDict(frozen=True)

    level: ComplexityTier = Field(
        default=ComplexityTier.MEDIUM,
        description="Complexity tier (simple, medium, complex, enterprise)",
    )
    estimated_lines: int = Field(
        default=0,
        ge=0,
        description="Estimated size of the generated code in lines",
    )
    frameworks: list[str] = Field(default_factory=list)
    integrations: list[str] = Field(default_factory=list)


class GenerationOptions(BaseModel):
    """Options for one generation request. Read-only inside the core."""

    model_config = ConfigDict(frozen=True)

    framework: str = Field(
        ...,
        min_length=1,
        description="Target framework (e.g., 'react', 'laravel')",
    )
    project_type: str = Field(
        ...,
        min_length=1,
        description="Project type (e.g., 'dashboard', 'fullstack')",
    )
    complexity: ProjectComplexity = Field(default_factory=ProjectComplexity)
    features: list[str] = Field(default_factory=list)
    streaming: bool = False
    temperature: float | None = Field(
        None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature override",
    )
    max_tokens: int | None = Field(
        None,
        ge=1,
        description="Maximum output tokens override",
    )


class CodeGenerationRequest(BaseModel):
    """Free-text prompt plus options; one per invocation."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    options: GenerationOptions
    user_id: str | None = None
    project_id: str | None = None


class StreamingProgressEvent(BaseModel):
    """One incremental update delivered during a streaming generation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Correlation id shared by every event of one generation")
    model_used: str = Field(..., description="Display name of the model; '(Simulated)' suffix for fallback")
    content: str = Field(default="", description="Accumulated content so far")
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    stage: str = ""
    estimated_completion: datetime
    is_complete: bool = False
    error: str | None = None
    skipped_frames: int = Field(
        default=0,
        ge=0,
        description="Malformed stream frames skipped so far",
    )


class GeneratedFile(BaseModel):
    """One file extracted from generated output."""

    path: str
    content: str
    type: FileKind
    language: str


class GenerationMetadata(BaseModel):
    """Attribution and quality data for a non-streaming generation."""

    model_used: str
    tokens_used: int = 0
    generation_time: float = Field(default=0.0, description="Wall-clock seconds")
    complexity: str
    frameworks: list[str] = Field(default_factory=list)
    estimated_quality: float = Field(default=0.0, ge=0.0, le=1.0)
    estimated_cost: float = Field(default=0.0, ge=0.0, description="USD, from catalog pricing")
    simulated: bool = False


class CodeGenerationResult(BaseModel):
    """Structured result of a non-streaming generation."""

    code: str
    files: list[GeneratedFile] = Field(default_factory=list)
    documentation: str = ""
    tests: str | None = None
    metadata: GenerationMetadata
