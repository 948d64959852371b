"""
External service integrations for AEOlytics.

- llm: LLM client for Fix-It brief generation (supports local/OpenAI/Anthropic)
- pipeline: query-processing pipeline that runs queries against AI engines
"""

from aeolytics.integrations.llm import LLMClient, Message, LLMResponse
from aeolytics.integrations.pipeline import PipelineResult, QueryPipelineClient

__all__ = [
    "LLMClient",
    "Message",
    "LLMResponse",
    "PipelineResult",
    "QueryPipelineClient",
]
