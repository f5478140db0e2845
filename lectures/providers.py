"""Chat request types and routing of requests between language-model providers."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Prefixes recognised even when no provider is registered under that name.
KNOWN_PREFIXES = ("openrouter", "ollama")


@dataclass
class ContentPart:
    """One part of a message: "text", "image" or "input_audio"."""

    type: str
    text: str = ""
    image_url: str = ""
    audio_data: str = ""
    audio_format: str = ""


@dataclass
class Message:
    """A chat message with multimodal content."""

    role: str
    content: List[ContentPart] = field(default_factory=list)


@dataclass
class ChatRequest:
    """Model name, conversation and streaming flag for one chat call."""

    model: str
    messages: List[Message] = field(default_factory=list)
    stream: bool = False


@dataclass
class ChatResponseChunk:
    """A piece of a response, with usage figures when the provider reports them."""

    text: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0


class ProviderNotFoundError(LookupError):
    """No provider can serve the requested model."""


class Provider(ABC):
    """A service that answers chat requests."""

    name: str = ""

    @abstractmethod
    def chat(self, request: ChatRequest) -> Iterable[ChatResponseChunk]:
        """Send the request and return its response chunks in order.

        A provider may strip its own prefix from request.model.
        """


class RoutingProvider(Provider):
    """Routes requests to a provider chosen by the model's "name:" prefix."""

    name = "routing-provider"

    def __init__(self, default_provider: Optional[Provider] = None) -> None:
        self.default_provider = default_provider
        self._providers: Dict[str, Provider] = {}
        self._lock = threading.Lock()

    def register(self, name: str, provider: Provider) -> None:
        """Make a provider reachable through the "name:" model prefix."""
        with self._lock:
            self._providers[name] = provider

    def get_provider(self, name: str) -> Optional[Provider]:
        """Return the provider registered under name, if any."""
        with self._lock:
            return self._providers.get(name)

    def _is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._providers

    def chat(self, request: ChatRequest) -> Iterable[ChatResponseChunk]:
        """Forward the request, stripping a recognised provider prefix from its model."""
        requested_model = request.model
        provider_name = ""

        prefix, separator, rest = requested_model.partition(":")
        if separator and (self._is_registered(prefix) or prefix in KNOWN_PREFIXES):
            provider_name = prefix
            request.model = rest
            logger.info("Routing LLM request with prefix stripping model=%s", rest)

        default = self.default_provider
        if provider_name:
            if self._is_registered(provider_name):
                provider = self.get_provider(provider_name)
                if provider is not None:
                    return provider.chat(request)
            if default is not None and default.name == provider_name:
                return default.chat(request)

        if default is not None:
            logger.debug(
                "Routing LLM request to default provider provider=%s model=%s",
                default.name, request.model,
            )
            return default.chat(request)

        raise ProviderNotFoundError(f"no LLM provider found for: {requested_model}")