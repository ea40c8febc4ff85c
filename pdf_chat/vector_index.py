"""Vector index backends: hosted Pinecone or a local persistent Chroma collection."""

from abc import ABC, abstractmethod

from langchain_chroma import Chroma
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_pinecone import PineconeVectorStore
from pinecone import Pinecone
from pydantic import BaseModel, Field

from pdf_chat.config import (
    CHROMA_COLLECTION_NAME,
    UPLOAD_BATCH_SIZE,
    UPLOAD_CONCURRENCY,
    Settings,
)
from pdf_chat.errors import ConfigError, SearchError
from pdf_chat.utils import ensure_dir, logger

TEXT_KEY = "text"


class SearchMatch(BaseModel):
    """One nearest-neighbor hit; ``text`` is empty when the metadata has none."""

    id: str | None = None
    score: float = 0.0
    text: str = ""
    metadata: dict = Field(default_factory=dict)


class VectorIndex(ABC):
    """Upsert embedded chunks and query them by vector."""

    @abstractmethod
    def upsert(self, documents: list[Document], embeddings: Embeddings) -> int:
        """Embed and store documents; returns the number stored."""

    @abstractmethod
    def query(self, vector: list[float], top_k: int) -> list[SearchMatch]:
        """Return up to ``top_k`` matches, most similar first."""


class PineconeIndex(VectorIndex):
    """Hosted Pinecone index. Chunk text lives in the ``text`` metadata field."""

    def __init__(self, index, text_key: str = TEXT_KEY, batch_size: int = UPLOAD_BATCH_SIZE):
        self.index = index
        self.text_key = text_key
        self.batch_size = batch_size

    def upsert(self, documents: list[Document], embeddings: Embeddings) -> int:
        if not documents:
            return 0
        store = PineconeVectorStore(index=self.index, embedding=embeddings, text_key=self.text_key)
        # async_req fans the batches out over the index's pool threads
        store.add_documents(documents, batch_size=self.batch_size, async_req=True)
        return len(documents)

    def query(self, vector: list[float], top_k: int) -> list[SearchMatch]:
        try:
            response = self.index.query(vector=vector, top_k=top_k, include_metadata=True)
        except Exception as e:
            raise SearchError(f"Pinecone query failed: {e}") from e

        matches = []
        for match in getattr(response, "matches", None) or []:
            metadata = dict(getattr(match, "metadata", None) or {})
            matches.append(
                SearchMatch(
                    id=getattr(match, "id", None),
                    score=getattr(match, "score", None) or 0.0,
                    text=metadata.get(self.text_key) or "",
                    metadata=metadata,
                )
            )
        return matches


class ChromaIndex(VectorIndex):
    """Local persistent Chroma collection using cosine distance."""

    def __init__(self, persist_directory, collection_name: str = CHROMA_COLLECTION_NAME):
        self.persist_directory = str(ensure_dir(persist_directory))
        self.collection_name = collection_name

    def _store(self, embeddings: Embeddings | None = None) -> Chroma:
        return Chroma(
            collection_name=self.collection_name,
            embedding_function=embeddings,
            persist_directory=self.persist_directory,
            collection_metadata={"hnsw:space": "cosine"},
        )

    def upsert(self, documents: list[Document], embeddings: Embeddings) -> int:
        if not documents:
            return 0
        self._store(embeddings).add_documents(documents)
        return len(documents)

    def query(self, vector: list[float], top_k: int) -> list[SearchMatch]:
        try:
            result = self._store()._collection.query(
                query_embeddings=[vector],
                n_results=top_k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            raise SearchError(f"Chroma query failed: {e}") from e

        ids = (result.get("ids") or [[]])[0]
        documents = (result.get("documents") or [[]])[0]
        metadatas = (result.get("metadatas") or [[]])[0]
        distances = (result.get("distances") or [[]])[0]
        matches = []
        for i, doc_id in enumerate(ids):
            metadata = dict(metadatas[i] or {}) if i < len(metadatas) else {}
            distance = distances[i] if i < len(distances) else 1.0
            matches.append(
                SearchMatch(
                    id=doc_id,
                    score=1.0 - distance,
                    text=(documents[i] if i < len(documents) else None) or "",
                    metadata=metadata,
                )
            )
        return matches


def connect_pinecone(settings: Settings) -> PineconeIndex:
    """Open the configured Pinecone index with a bounded upload thread pool."""
    try:
        client = Pinecone(api_key=settings.pinecone_api_key)
        # resolving the host calls describe_index, so bad keys and names fail here
        index = client.Index(settings.pinecone_index_name, pool_threads=UPLOAD_CONCURRENCY)
    except Exception as e:
        raise ConfigError(f"Could not open Pinecone index {settings.pinecone_index_name!r}: {e}") from e
    logger.info("Connected to Pinecone index %s", settings.pinecone_index_name)
    return PineconeIndex(index)


def get_vector_index(settings: Settings) -> VectorIndex:
    """Build the vector index named by VECTOR_STORE."""
    if settings.vector_store == "pinecone":
        return connect_pinecone(settings)
    if settings.vector_store == "chroma":
        logger.info("Using local Chroma collection in %s", settings.chroma_dir)
        return ChromaIndex(settings.chroma_dir)
    raise ConfigError(f"Unknown vector store: {settings.vector_store}")
