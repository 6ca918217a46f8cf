"""Model clients - chat completion and embedding providers."""

from .base import BaseChatModel, BaseEmbeddingModel
from .ollama import OllamaChatModel, OllamaEmbeddingModel
from .openai_compat import OpenAIChatModel, OpenAIEmbeddingModel

# Provider -> (chat client class, embedding client class)
handlers = {
    "ollama": (OllamaChatModel, OllamaEmbeddingModel),
    "openai": (OpenAIChatModel, OpenAIEmbeddingModel),
}

default = "ollama"


def _get_handler(provider: str):
    handler = handlers.get(provider.lower())
    if handler is None:
        raise ValueError(f"Unknown LLM provider: {provider}")
    return handler


def create_chat_model(settings) -> BaseChatModel:
    """
    Build the chat client configured in settings.

    Args:
        settings: Application settings instance

    Returns:
        Chat model client
    """
    chat_class, _ = _get_handler(settings.llm_provider)
    return chat_class(
        model=settings.chat_model,
        temperature=settings.llm_temperature,
        **settings.get_llm_config()
    )


def create_embedding_model(settings) -> BaseEmbeddingModel:
    """
    Build the embedding client configured in settings.

    Args:
        settings: Application settings instance

    Returns:
        Embedding model client
    """
    _, embedding_class = _get_handler(settings.llm_provider)
    return embedding_class(model=settings.embedding_model, **settings.get_llm_config())


__all__ = [
    "BaseChatModel",
    "BaseEmbeddingModel",
    "OllamaChatModel",
    "OllamaEmbeddingModel",
    "OpenAIChatModel",
    "OpenAIEmbeddingModel",
    "handlers",
    "default",
    "create_chat_model",
    "create_embedding_model",
]
