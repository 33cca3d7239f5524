"""
Google AI LLM Client

Implementation of the LLM interface for the Gemini generateContent API.

The streaming endpoint returns a JSON array of response objects, pretty-printed
across many lines; bare newline-delimited objects are accepted too.
Authentication is a `key` query parameter.
"""

from collections.abc import AsyncIterator
from typing import Any

from codeforge.models.contracts.generation import GenerationOptions
from codeforge.models.enums import Provider
from codeforge.services.llm.base import BaseLLMClient, Frame, error_detail
from codeforge.services.llm.framing import JsonObjectSplitter


def _candidate_text(candidate: dict[str, Any]) -> str:
    try:
        return candidate["content"]["parts"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


class GoogleAIClient(BaseLLMClient):
    """Google Gemini LLM client implementation."""

    provider = Provider.GOOGLE

    def request_url(self, *, stream: bool) -> str:
        method = "streamGenerateContent" if stream else "generateContent"
        return f"{self.config.base_url.rstrip('/')}/v1beta/models/{self.config.model}:{method}"

    def request_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", **self.config.extra_headers}

    def request_params(self) -> dict[str, str]:
        return {"key": self.config.api_key}

    def request_body(
        self, prompt: str, system_prompt: str, options: GenerationOptions, *, stream: bool
    ) -> dict[str, Any]:
        # Gemini has no separate system role in this API version
        return {
            "contents": [{"parts": [{"text": f"{system_prompt}\n\nUser: {prompt}"}]}],
            "generationConfig": {
                "temperature": self.temperature(options),
                "maxOutputTokens": self.max_tokens(options),
            },
        }

    def extract_text(self, data: dict[str, Any]) -> str | None:
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        return _candidate_text(candidates[0]) or None

    async def iter_frames(self, lines: AsyncIterator[str]) -> AsyncIterator[Frame]:
        splitter = JsonObjectSplitter()
        async for line in lines:
            for data in splitter.feed(line):
                yield self._classify(data)
        for data in splitter.finish():
            yield self._classify(data)

    def _classify(self, data: dict[str, Any] | None) -> Frame:
        if data is None:
            return Frame.malformed()

        if data.get("error"):
            return Frame.failed(error_detail(data["error"]))

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return Frame.malformed()

        candidate = candidates[0]
        text = _candidate_text(candidate)
        if candidate.get("finishReason"):
            return Frame.done(text)
        return Frame.delta(text)
