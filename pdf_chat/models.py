"""Embedding and chat model providers.

A provider bundles the embedding model and the chat model of one tier so the
rest of the pipeline never branches on which backend is configured. The tier
is picked once at startup by ``get_model_provider``.
"""

from abc import ABC, abstractmethod

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings
from langchain_ollama import ChatOllama, OllamaEmbeddings
from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from pdf_chat.config import (
    GEMINI_EMBEDDING_MODEL,
    GEMINI_LLM_MODEL,
    LLM_TEMPERATURE,
    OLLAMA_EMBEDDING_MODEL,
    OLLAMA_LLM_MODEL,
    OLLAMA_NUM_CTX,
    OLLAMA_TIMEOUT_SECONDS,
    OPENAI_EMBEDDING_MODEL,
    OPENAI_LLM_MODEL,
    Settings,
)
from pdf_chat.errors import CompletionError, ConfigError, EmbeddingError
from pdf_chat.utils import logger


class ModelProvider(ABC):
    """Capability interface: text -> vector and prompt -> text."""

    name: str = "abstract"

    @property
    @abstractmethod
    def embeddings(self) -> Embeddings:
        """LangChain embeddings, used by the vector store during upload."""

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed a single query string."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send a rendered prompt to the chat model and return plain text."""


class LangChainModelProvider(ModelProvider):
    """Provider backed by a LangChain embeddings object and chat model."""

    def __init__(self, embeddings: Embeddings, chat_model: BaseChatModel, name: str = "langchain"):
        self._embeddings = embeddings
        self.chat_model = chat_model
        self.name = name
        self._chain = chat_model | StrOutputParser()

    @property
    def embeddings(self) -> Embeddings:
        return self._embeddings

    def embed(self, text: str) -> list[float]:
        try:
            return self._embeddings.embed_query(text)
        except Exception as e:
            raise EmbeddingError(f"{self.name} embedding failed: {e}") from e

    def complete(self, prompt: str) -> str:
        try:
            return self._chain.invoke(prompt)
        except Exception as e:
            raise CompletionError(f"{self.name} chat model failed: {e}") from e


class CloudModelProvider(LangChainModelProvider):
    """Hosted models (Gemini or OpenAI); uses the client's default timeouts."""

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudModelProvider":
        if settings.cloud_provider == "gemini":
            embeddings = GoogleGenerativeAIEmbeddings(
                model=GEMINI_EMBEDDING_MODEL,
                google_api_key=settings.gemini_api_key,
            )
            chat_model = ChatGoogleGenerativeAI(
                model=GEMINI_LLM_MODEL,
                google_api_key=settings.gemini_api_key,
                temperature=LLM_TEMPERATURE,
            )
        elif settings.cloud_provider == "openai":
            embeddings = OpenAIEmbeddings(
                model=OPENAI_EMBEDDING_MODEL,
                api_key=settings.openai_api_key,
            )
            chat_model = ChatOpenAI(
                model=OPENAI_LLM_MODEL,
                api_key=settings.openai_api_key,
                temperature=LLM_TEMPERATURE,
            )
        else:
            raise ConfigError(f"Unknown cloud provider: {settings.cloud_provider}")
        return cls(embeddings, chat_model, name=settings.cloud_provider)


class OllamaModelProvider(LangChainModelProvider):
    """Local models served by Ollama (no API quota)."""

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaModelProvider":
        embeddings = OllamaEmbeddings(
            model=OLLAMA_EMBEDDING_MODEL,
            base_url=settings.ollama_base_url,
        )
        chat_model = ChatOllama(
            model=OLLAMA_LLM_MODEL,
            base_url=settings.ollama_base_url,
            temperature=LLM_TEMPERATURE,
            num_ctx=OLLAMA_NUM_CTX,
            client_kwargs={"timeout": OLLAMA_TIMEOUT_SECONDS},
        )
        return cls(embeddings, chat_model, name="ollama")


def get_model_provider(settings: Settings) -> ModelProvider:
    """Build the provider for the configured tier."""
    try:
        if settings.use_ollama:
            provider = OllamaModelProvider.from_settings(settings)
        else:
            provider = CloudModelProvider.from_settings(settings)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Could not set up {settings.model_tier} models: {e}") from e

    if settings.use_ollama:
        logger.info("Using local Ollama models (%s, %s)", OLLAMA_LLM_MODEL, OLLAMA_EMBEDDING_MODEL)
    else:
        logger.info("Using cloud models from %s", provider.name)
    return provider
