from llmgate.errors import EmbeddingAggregateError, InvalidModelError, ProviderError, UpstreamCallError
from llmgate.models import BatchError


def test_error_messages_keep_diagnostics() -> None:
    assert str(InvalidModelError("gpt-2")) == "OpenAI chat: gpt-2 is not valid for chat completion!"

    call_error = UpstreamCallError("createModeration", "connection reset")
    assert str(call_error) == "OpenAI::createModeration failed with: connection reset"

    aggregate = EmbeddingAggregateError(
        [BatchError(type="server_error", message="boom"), BatchError(type="timeout", message="slow")]
    )
    assert str(aggregate) == "OpenAI Failed to embed: (2) Embedding Errors! [server_error]: boom, [timeout]: slow"
    assert all(isinstance(err, ProviderError) for err in (call_error, aggregate))
