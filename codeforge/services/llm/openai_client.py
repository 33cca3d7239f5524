"""
OpenAI LLM Client

Implementation of the LLM interface for OpenAI's Chat Completions API.
"""

from typing import Any

from codeforge.models.contracts.generation import GenerationOptions
from codeforge.models.enums import Provider
from codeforge.services.llm.base import BaseLLMClient, Frame, error_detail
from codeforge.services.llm.framing import load_json_object, sse_data

DONE_SENTINEL = "[DONE]"


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT LLM client implementation."""

    provider = Provider.OPENAI
    endpoint_path = "/chat/completions"

    def request_url(self, *, stream: bool) -> str:
        return f"{self.config.base_url.rstrip('/')}{self.endpoint_path}"

    def request_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            **self.config.extra_headers,
        }

    def request_body(
        self, prompt: str, system_prompt: str, options: GenerationOptions, *, stream: bool
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature(options),
            "max_tokens": self.max_tokens(options),
        }
        if stream:
            body["stream"] = True
        return body

    def extract_text(self, data: dict[str, Any]) -> str | None:
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None

    def parse_frame(self, line: str) -> Frame:
        payload = sse_data(line)
        if payload is None:
            return Frame.ignore()
        if payload.strip() == DONE_SENTINEL:
            return Frame.done()

        data = load_json_object(payload)
        if data is None:
            return Frame.malformed()

        if data.get("error"):
            return Frame.failed(error_detail(data["error"]))

        try:
            delta = data["choices"][0]["delta"]
        except (KeyError, IndexError, TypeError):
            return Frame.malformed()
        if not isinstance(delta, dict):
            return Frame.malformed()

        # Role-only and finish chunks carry no content
        return Frame.delta(delta.get("content") or "")
