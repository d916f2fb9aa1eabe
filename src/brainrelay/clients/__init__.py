"""API client layer for Brain Relay.

Async HTTP clients for the remote services the pipeline talks to:
- OpenAI Assistants API: threads, messages, runs
"""

from brainrelay.clients.base import BaseAsyncClient, APIProviderError
from brainrelay.clients.assistants import AssistantsClient

__all__ = [
    "BaseAsyncClient",
    "APIProviderError",
    "AssistantsClient",
]
