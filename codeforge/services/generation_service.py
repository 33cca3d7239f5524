"""
Code Generation Service

Orchestrates one generation request end to end:
select model -> compose prompts -> resolve credential -> dispatch to the
provider adapter -> degrade to the fallback generator on vendor failure.

Error policy:
- Missing credential: ConfigurationError, always raised, never recovered
- Vendor failure (adapter raises): recovered with synthesized output
  (non-streaming) or the simulated staged sequence (streaming)
- Vendor-reported stream error: passed through as the terminal event
- Cancellation: always propagates
"""

import asyncio
import logging
import re
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath
from uuid import uuid4

from codeforge.config import Settings, get_settings
from codeforge.core.cancellation import CancellationToken
from codeforge.core.exceptions import ConfigurationError, GenerationCancelledError
from codeforge.models.contracts.generation import (
    CodeGenerationRequest,
    CodeGenerationResult,
    GeneratedFile,
    GenerationMetadata,
    StreamingProgressEvent,
)
from codeforge.models.enums import FileKind, Provider
from codeforge.services import model_catalog
from codeforge.services.credential_store import CredentialStore
from codeforge.services.fallback_generator import (
    SIMULATED_LABEL_SUFFIX,
    simulated_stages,
    synthesize,
)
from codeforge.services.llm.base import BaseLLMClient, EventCallback, emit_event
from codeforge.services.llm.factory import create_llm_client
from codeforge.services.model_catalog import ModelDescriptor, estimate_cost, select_optimal_model
from codeforge.services.prompt_composer import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., BaseLLMClient]

# =============================================================================
# Generated output parsing
# =============================================================================

FENCE_PATTERN = re.compile(r"```([\w+#.-]*)[^\n]*\n(.*?)```", re.DOTALL)
PATH_COMMENT_PATTERN = re.compile(r"^\s*(?://|#)\s*([\w@./-]+\.\w+)\s*$")
TEST_PATH_PATTERN = re.compile(
    r"(^|/)(tests?|__tests__|specs?)/|\.(test|spec)\.\w+$|(^|/)test_[^/]+$",
    re.IGNORECASE,
)

LANGUAGE_EXTENSIONS: dict[str, str] = {
    "typescript": "ts",
    "ts": "ts",
    "tsx": "tsx",
    "javascript": "js",
    "js": "js",
    "jsx": "jsx",
    "php": "php",
    "python": "py",
    "py": "py",
    "vue": "vue",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "json": "json",
    "yaml": "yaml",
    "yml": "yml",
    "sql": "sql",
    "bash": "sh",
    "sh": "sh",
}

EXTENSION_LANGUAGES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "php": "php",
    "py": "python",
    "vue": "vue",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "sql": "sql",
    "sh": "bash",
}

CONFIG_EXTENSIONS = frozenset({"json", "yaml", "yml", "toml", "env", "ini"})

SIMULATED_QUALITY_CAP = 0.6


def _language_for(path: str, fence_language: str) -> str:
    if fence_language:
        return fence_language
    suffix = PurePosixPath(path).suffix.lstrip(".").lower()
    return EXTENSION_LANGUAGES.get(suffix, "text")


def classify_file(path: str) -> FileKind:
    """Infer the kind of a generated file from its path."""
    lowered = path.lower()
    pure = PurePosixPath(lowered)
    name = PurePosixPath(path).name

    if TEST_PATH_PATTERN.search(lowered):
        return FileKind.TEST
    if pure.suffix.lstrip(".") in CONFIG_EXTENSIONS or "config" in pure.name:
        return FileKind.CONFIG
    if "/hooks/" in f"/{lowered}" or re.match(r"use[A-Z]", name):
        return FileKind.HOOK
    if "/services/" in f"/{lowered}" or "/api/" in f"/{lowered}" or "service" in pure.stem:
        return FileKind.SERVICE
    return FileKind.COMPONENT


def parse_generated_files(content: str) -> tuple[list[GeneratedFile], str]:
    """
    Split generated output into files and documentation.

    Each fenced code block becomes one file. The path comes from a
    `// path` or `# path` comment on the block's first line (which is
    removed from the file body), or is derived from the block language.
    Text outside code blocks is returned as documentation. Output with no
    fenced blocks is treated as a single file.

    Returns:
        Tuple of (files, documentation)
    """
    files: list[GeneratedFile] = []

    for index, match in enumerate(FENCE_PATTERN.finditer(content), start=1):
        fence_language = match.group(1).lower()
        body = match.group(2)

        first_line, _, rest = body.partition("\n")
        path_match = PATH_COMMENT_PATTERN.match(first_line)
        if path_match:
            path = path_match.group(1)
            body = rest
        else:
            extension = LANGUAGE_EXTENSIONS.get(fence_language, "txt")
            path = f"src/file{index}.{extension}"

        files.append(
            GeneratedFile(
                path=path,
                content=body.rstrip() + "\n",
                type=classify_file(path),
                language=_language_for(path, fence_language),
            )
        )

    if not files:
        stripped = content.strip()
        if not stripped:
            return [], ""
        return [
            GeneratedFile(
                path="src/main.txt",
                content=stripped + "\n",
                type=FileKind.COMPONENT,
                language="text",
            )
        ], ""

    documentation = FENCE_PATTERN.sub("", content)
    documentation = re.sub(r"\n{3,}", "\n\n", documentation).strip()
    return files, documentation


def estimate_quality(
    files: list[GeneratedFile], documentation: str, tests: str | None, *, simulated: bool
) -> float:
    """Rough 0..1 quality score from the shape of the output."""
    score = 0.5
    if files:
        score += 0.2
    if len(files) > 1:
        score += 0.1
    if documentation:
        score += 0.1
    if tests:
        score += 0.1
    score = min(score, 1.0)
    if simulated:
        score = min(score, SIMULATED_QUALITY_CAP)
    return round(score, 2)


# =============================================================================
# Streaming relay
# =============================================================================


class _CallbackError(Exception):
    """Carries an exception raised by the caller's on_event callback."""

    def __init__(self, error: Exception):
        super().__init__(str(error))
        self.error = error


class _StreamRelay:
    """
    Forwards adapter events to the caller.

    Keeps progress non-decreasing, remembers the last delivered content,
    and drops everything after the terminal event. Exceptions raised by
    the callback come back wrapped in _CallbackError.
    """

    def __init__(self, on_event: EventCallback):
        self.on_event = on_event
        self.progress = 0.0
        self.content = ""
        self.completed = False
        self.delivered = 0

    async def __call__(self, event: StreamingProgressEvent) -> None:
        if self.completed:
            return
        if event.progress < self.progress:
            event = event.model_copy(update={"progress": self.progress})
        self.progress = event.progress
        self.content = event.content
        self.completed = event.is_complete
        self.delivered += 1
        try:
            await emit_event(self.on_event, event)
        except Exception as e:
            raise _CallbackError(e) from e


# =============================================================================
# Service
# =============================================================================


class CodeGenerationService:
    """
    Generation orchestrator.

    Collaborators are injected; there is no module-level instance.

    Usage:
        store = CredentialStore()
        service = CodeGenerationService(store)
        code = await service.generate_code(request)
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        *,
        settings: Settings | None = None,
        client_factory: ClientFactory = create_llm_client,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.credential_store = credential_store
        self.settings = settings or get_settings()
        self.client_factory = client_factory
        self._sleep = sleep

    # -------------------------------------------------------------------------
    # Shared steps
    # -------------------------------------------------------------------------

    def _prepare(
        self, request: CodeGenerationRequest
    ) -> tuple[ModelDescriptor, str, str, BaseLLMClient]:
        """Select the model, build prompts, resolve the credential and build the adapter."""
        options = request.options
        model = select_optimal_model(options)
        logger.info(f"Selected model: {model.name} for complexity: {options.complexity.level.value}")

        system_prompt = build_system_prompt(options)
        user_prompt = build_user_prompt(request.prompt, options)

        api_key = self.credential_store.get(model.provider)
        if not api_key:
            raise ConfigurationError(model.provider.value)

        client = self.client_factory(model.provider, api_key, model=model, settings=self.settings)
        return model, system_prompt, user_prompt, client

    async def _pause(self, seconds: float, cancel_token: CancellationToken | None) -> None:
        if cancel_token is not None:
            await cancel_token.sleep(seconds)
        else:
            await self._sleep(seconds)

    async def _generate(
        self, request: CodeGenerationRequest, cancel_token: CancellationToken | None
    ) -> tuple[str, ModelDescriptor, bool]:
        model, system_prompt, user_prompt, client = self._prepare(request)
        options = request.options

        try:
            content = await client.complete(
                user_prompt, system_prompt, options, cancel_token=cancel_token
            )
            return content, model, False
        except GenerationCancelledError:
            raise
        except Exception as e:
            logger.warning(f"Generation with {model.provider.value} failed: {e}")
            logger.info(f"Using fallback generator for {options.framework}/{options.project_type}")
            return synthesize(options.framework, options.project_type, request.prompt), model, True

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    async def generate_code(
        self,
        request: CodeGenerationRequest,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> str:
        """
        Generate code for a request (non-streaming).

        Returns:
            Generated text, or synthesized fallback code if the vendor call failed

        Raises:
            ConfigurationError: If no API key is configured for the selected provider
            GenerationCancelledError: If the token is cancelled
        """
        content, _, _ = await self._generate(request, cancel_token)
        return content

    async def stream_code_generation(
        self,
        request: CodeGenerationRequest,
        on_event: EventCallback,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        """
        Generate code for a request, reporting progress through on_event.

        Exactly one delivered event has is_complete=True and it is the last
        one. Progress never decreases and content never shrinks.
        An exception raised by on_event propagates to the caller unchanged
        and does not start the simulated stream.

        Raises:
            ConfigurationError: If no API key is configured (before any event)
            GenerationCancelledError: If the token is cancelled
        """
        model, system_prompt, user_prompt, client = self._prepare(request)
        generation_id = str(uuid4())
        relay = _StreamRelay(on_event)

        try:
            await self._relay_stream(
                request, model, system_prompt, user_prompt, client, generation_id, relay, cancel_token
            )
        except _CallbackError as e:
            raise e.error from None

    async def _relay_stream(
        self,
        request: CodeGenerationRequest,
        model: ModelDescriptor,
        system_prompt: str,
        user_prompt: str,
        client: BaseLLMClient,
        generation_id: str,
        relay: _StreamRelay,
        cancel_token: CancellationToken | None,
    ) -> None:
        """Run the vendor stream, degrading to the simulated stream on failure."""
        try:
            await client.stream(
                user_prompt,
                system_prompt,
                request.options,
                relay,
                generation_id=generation_id,
                cancel_token=cancel_token,
            )
        except (GenerationCancelledError, _CallbackError):
            raise
        except Exception as e:
            logger.warning(f"Streaming with {model.provider.value} failed: {e}")
            if relay.completed:
                return
            logger.info(
                f"Running simulated stream for generation {generation_id} "
                f"({relay.delivered} event(s) already delivered)"
            )
            await self._simulate_stream(request, model, generation_id, relay, cancel_token)

    async def _simulate_stream(
        self,
        request: CodeGenerationRequest,
        model: ModelDescriptor,
        generation_id: str,
        relay: _StreamRelay,
        cancel_token: CancellationToken | None,
    ) -> None:
        options = request.options
        stages = simulated_stages(options.framework, options.project_type, request.prompt)
        delay = self.settings.simulated_stage_delay_seconds
        label = f"{model.name}{SIMULATED_LABEL_SUFFIX}"
        content = relay.content

        for i, stage in enumerate(stages):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            if i:
                await self._pause(delay, cancel_token)

            content += stage.fragment
            is_last = i == len(stages) - 1
            remaining = timedelta(seconds=delay * (len(stages) - 1 - i))

            await relay(
                StreamingProgressEvent(
                    id=generation_id,
                    model_used=label,
                    content=content,
                    progress=stage.progress,
                    stage=stage.name,
                    estimated_completion=datetime.now(timezone.utc) + remaining,
                    is_complete=is_last,
                )
            )

    async def generate_project(
        self,
        request: CodeGenerationRequest,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> CodeGenerationResult:
        """
        Generate code and split it into files, documentation and tests.

        Raises:
            ConfigurationError: If no API key is configured for the selected provider
            GenerationCancelledError: If the token is cancelled
        """
        options = request.options
        started = time.perf_counter()
        content, model, simulated = await self._generate(request, cancel_token)
        elapsed = time.perf_counter() - started

        files, documentation = parse_generated_files(content)
        test_files = [f for f in files if f.type == FileKind.TEST]
        tests = "\n\n".join(f"// {f.path}\n{f.content}" for f in test_files) or None

        tokens = len(content) // 4
        frameworks = list(dict.fromkeys([options.framework, *options.complexity.frameworks]))

        metadata = GenerationMetadata(
            model_used=f"{model.name}{SIMULATED_LABEL_SUFFIX}" if simulated else model.name,
            tokens_used=tokens,
            generation_time=elapsed,
            complexity=options.complexity.level.value,
            frameworks=frameworks,
            estimated_quality=estimate_quality(files, documentation, tests, simulated=simulated),
            estimated_cost=estimate_cost(model, tokens),
            simulated=simulated,
        )

        return CodeGenerationResult(
            code=content,
            files=files,
            documentation=documentation,
            tests=tests,
            metadata=metadata,
        )

    # -------------------------------------------------------------------------
    # Catalog and credential delegation
    # -------------------------------------------------------------------------

    def get_available_models(self) -> list[ModelDescriptor]:
        return model_catalog.get_available_models()

    def set_api_key(self, provider: Provider | str, key: str) -> None:
        self.credential_store.set(provider, key)

    def has_api_key(self, provider: Provider | str) -> bool:
        return self.credential_store.has(provider)

    def get_configured_providers(self) -> list[Provider]:
        return self.credential_store.list_configured()
