"""
Groq LLM Client

Groq serves an OpenAI-compatible Chat Completions API under /openai/v1,
so only the endpoint differs from OpenAIClient.
"""

from codeforge.models.enums import Provider
from codeforge.services.llm.openai_client import OpenAIClient


class GroqClient(OpenAIClient):
    """Groq LLM client implementation."""

    provider = Provider.GROQ
    endpoint_path = "/openai/v1/chat/completions"
