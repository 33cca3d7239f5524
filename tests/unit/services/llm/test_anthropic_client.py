"""
Unit tests for the Anthropic client.
"""

import json

import httpx
import pytest

from codeforge.core.exceptions import ProviderError
from codeforge.models.enums import Provider
from codeforge.services.llm.anthropic_client import AnthropicClient
from codeforge.services.llm.base import ProviderConfig


def sse_event(event_type: str, **data) -> list[str]:
    return [f"event: {event_type}", "data: " + json.dumps({"type": event_type, **data}), ""]


def text_delta(text: str) -> list[str]:
    return sse_event("content_block_delta", index=0, delta={"type": "text_delta", "text": text})


def make_client(http_client: httpx.AsyncClient) -> AnthropicClient:
    config = ProviderConfig(
        api_key="sk-ant-test",
        model="claude-3-sonnet-20240229",
        display_name="Claude 3 Sonnet",
        base_url="https://api.anthropic.com",
        extra_headers={"anthropic-version": "2023-06-01"},
    )
    return AnthropicClient(config, http_client=http_client)


class TestAnthropicComplete:
    """Tests for AnthropicClient.complete."""

    @pytest.mark.asyncio
    async def test_request_shape(self, respond_with, recorded_requests, options):
        """Test URL, auth headers and body of a messages request."""
        client = make_client(
            respond_with(200, json={"content": [{"type": "text", "text": "<?php echo 1;"}]})
        )

        result = await client.complete("user prompt", "system prompt", options)

        assert result == "<?php echo 1;"
        request = recorded_requests[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-ant-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert "authorization" not in request.headers
        body = json.loads(request.content)
        assert body == {
            "model": "claude-3-sonnet-20240229",
            "max_tokens": 2000,
            "system": "system prompt",
            "messages": [{"role": "user", "content": "user prompt"}],
            "temperature": 0.7,
        }

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self, respond_with, options):
        """Test multiple text blocks are concatenated and other blocks ignored."""
        client = make_client(
            respond_with(
                200,
                json={
                    "content": [
                        {"type": "text", "text": "a"},
                        {"type": "tool_use", "id": "t1"},
                        {"type": "text", "text": "b"},
                    ]
                },
            )
        )

        assert await client.complete("p", "s", options) == "ab"

    @pytest.mark.asyncio
    async def test_empty_content_placeholder(self, respond_with, options):
        """Test a response without text returns the placeholder."""
        client = make_client(respond_with(200, json={"content": []}))

        assert await client.complete("p", "s", options) == "No response generated"

    @pytest.mark.asyncio
    async def test_error_status(self, respond_with, options):
        """Test vendor error messages are carried on ProviderError."""
        client = make_client(
            respond_with(
                529,
                json={"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
            )
        )

        with pytest.raises(ProviderError) as exc_info:
            await client.complete("p", "s", options)

        assert exc_info.value.status_code == 529
        assert "Overloaded" in exc_info.value.message

    def test_provider(self, respond_with):
        """Test provider identity."""
        assert make_client(respond_with(200)).provider == Provider.ANTHROPIC


class TestAnthropicStream:
    """Tests for AnthropicClient.stream."""

    @pytest.mark.asyncio
    async def test_streams_text_deltas(self, respond_with, recorded_requests, options):
        """Test text deltas accumulate and message_stop completes the stream."""
        lines = [
            *sse_event("message_start", message={"id": "msg_1"}),
            *sse_event("content_block_start", index=0, content_block={"type": "text", "text": ""}),
            *sse_event("ping"),
            *text_delta("Hello"),
            *text_delta(" there"),
            *sse_event("content_block_stop", index=0),
            *sse_event("message_delta", delta={"stop_reason": "end_turn"}),
            *sse_event("message_stop"),
        ]
        client = make_client(respond_with(200, content="\n".join(lines).encode()))
        events = []

        await client.stream("p", "s", options, events.append)

        assert json.loads(recorded_requests[0].content)["stream"] is True
        assert [e.content for e in events] == ["Hello", "Hello there", "Hello there"]
        assert events[-1].is_complete is True
        assert events[-1].progress == 100

    @pytest.mark.asyncio
    async def test_other_event_types_are_not_malformed(self, respond_with, options):
        """Test ignored event types do not count as skipped frames."""
        lines = [*sse_event("message_start", message={}), *sse_event("ping"), *sse_event("message_stop")]
        client = make_client(respond_with(200, content="\n".join(lines).encode()))
        events = []

        await client.stream("p", "s", options, events.append)

        assert len(events) == 1
        assert events[0].skipped_frames == 0

    @pytest.mark.asyncio
    async def test_missing_type_is_malformed(self, respond_with, options):
        """Test data without a type field is counted as malformed."""
        lines = [*text_delta("a"), 'data: {"delta": {"text": "x"}}', *sse_event("message_stop")]
        client = make_client(respond_with(200, content="\n".join(lines).encode()))
        events = []

        await client.stream("p", "s", options, events.append)

        assert events[-1].content == "a"
        assert events[-1].skipped_frames == 1

    @pytest.mark.asyncio
    async def test_error_event(self, respond_with, options):
        """Test an error event ends the stream with the vendor message."""
        lines = [
            *text_delta("partial"),
            *sse_event("error", error={"type": "overloaded_error", "message": "Overloaded"}),
        ]
        client = make_client(respond_with(200, content="\n".join(lines).encode()))
        events = []

        await client.stream("p", "s", options, events.append)

        assert events[-1].is_complete is True
        assert events[-1].error == "Overloaded"
        assert events[-1].content == "partial"

    @pytest.mark.asyncio
    async def test_eof_without_message_stop_raises(self, respond_with, options):
        """Test a truncated stream raises ProviderError."""
        client = make_client(respond_with(200, content="\n".join(text_delta("a")).encode()))

        with pytest.raises(ProviderError):
            await client.stream("p", "s", options, lambda event: None)
