import pytest

from lectures.providers import (
    ChatRequest,
    ChatResponseChunk,
    ContentPart,
    Message,
    Provider,
    ProviderNotFoundError,
    RoutingProvider,
)


class RecordingProvider(Provider):
    def __init__(self, name):
        self.name = name
        self.models = []

    def chat(self, request):
        self.models.append(request.model)
        return [ChatResponseChunk(text="mock response")]


def make_request(model):
    return ChatRequest(
        model=model,
        messages=[Message(role="user", content=[ContentPart(type="text", text="hi")])],
    )


def test_routes_ollama_prefix_and_strips_it():
    mock_ollama = RecordingProvider("ollama-mock")
    routing = RoutingProvider(None)
    routing.register("ollama", mock_ollama)

    request = make_request("ollama:gemma3:1b")
    routing.chat(request)

    assert mock_ollama.models == ["gemma3:1b"]
    assert request.model == "gemma3:1b"


def test_routed_chunks_are_returned():
    routing = RoutingProvider(None)
    routing.register("ollama", RecordingProvider("ollama-mock"))

    chunks = list(routing.chat(make_request("ollama:gemma3:1b")))

    assert chunks == [ChatResponseChunk(text="mock response")]


def test_custom_registered_prefix():
    local = RecordingProvider("local")
    default = RecordingProvider("openrouter")
    routing = RoutingProvider(default)
    routing.register("local", local)

    request = make_request("local:tiny-model")
    routing.chat(request)

    assert local.models == ["tiny-model"]
    assert default.models == []


def test_unknown_prefix_goes_to_default_unchanged():
    default = RecordingProvider("openrouter")
    routing = RoutingProvider(default)

    request = make_request("vendor:model")
    routing.chat(request)

    assert default.models == ["vendor:model"]
    assert request.model == "vendor:model"


def test_known_prefix_uses_default_with_same_name():
    default = RecordingProvider("openrouter")
    routing = RoutingProvider(default)

    routing.chat(make_request("openrouter:google/gemini-2.5-flash-lite"))

    assert default.models == ["google/gemini-2.5-flash-lite"]


def test_known_prefix_falls_back_to_other_default_stripped():
    default = RecordingProvider("ollama")
    routing = RoutingProvider(default)

    routing.chat(make_request("openrouter:some-model"))

    assert default.models == ["some-model"]


def test_model_without_prefix_goes_to_default():
    default = RecordingProvider("ollama")
    routing = RoutingProvider(default)

    routing.chat(make_request("gemma3"))

    assert default.models == ["gemma3"]


def test_no_provider_raises():
    routing = RoutingProvider(None)
    with pytest.raises(ProviderNotFoundError, match="no LLM provider found for: vendor:model"):
        routing.chat(make_request("vendor:model"))


def test_known_prefix_without_any_provider_raises():
    routing = RoutingProvider(None)
    with pytest.raises(ProviderNotFoundError, match="ollama:gemma3"):
        routing.chat(make_request("ollama:gemma3"))


def test_get_provider():
    mock = RecordingProvider("ollama-mock")
    routing = RoutingProvider(None)
    routing.register("ollama", mock)

    assert routing.get_provider("ollama") is mock
    assert routing.get_provider("openrouter") is None


def test_routing_provider_name():
    assert RoutingProvider(None).name == "routing-provider"