"""
Anthropic LLM Client

Implementation of the LLM interface for Anthropic's Messages API.
"""

from typing import Any

from codeforge.models.contracts.generation import GenerationOptions
from codeforge.models.enums import Provider
from codeforge.services.llm.base import BaseLLMClient, Frame, error_detail
from codeforge.services.llm.framing import load_json_object, sse_data


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude LLM client implementation."""

    provider = Provider.ANTHROPIC

    def request_url(self, *, stream: bool) -> str:
        return f"{self.config.base_url.rstrip('/')}/v1/messages"

    def request_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "Content-Type": "application/json",
            **self.config.extra_headers,
        }

    def request_body(
        self, prompt: str, system_prompt: str, options: GenerationOptions, *, stream: bool
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.max_tokens(options),
            "system": system_prompt,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature(options),
        }
        if stream:
            body["stream"] = True
        return body

    def extract_text(self, data: dict[str, Any]) -> str | None:
        blocks = data.get("content")
        if not isinstance(blocks, list):
            return None
        parts = [
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        return "".join(parts) or None

    def parse_frame(self, line: str) -> Frame:
        payload = sse_data(line)
        if payload is None:
            return Frame.ignore()

        data = load_json_object(payload)
        if data is None or "type" not in data:
            return Frame.malformed()

        event_type = data["type"]

        if event_type == "content_block_delta":
            delta = data.get("delta")
            if not isinstance(delta, dict):
                return Frame.malformed()
            return Frame.delta(delta.get("text") or "")

        if event_type == "message_stop":
            return Frame.done()

        if event_type == "error":
            return Frame.failed(error_detail(data.get("error")))

        # message_start, content_block_start/stop, message_delta, ping
        return Frame.ignore()
