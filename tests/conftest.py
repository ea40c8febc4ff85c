"""Shared fakes standing in for the hosted model and index services."""

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from pdf_chat.errors import CompletionError, EmbeddingError
from pdf_chat.history import HistoryBuffer
from pdf_chat.models import ModelProvider
from pdf_chat.vector_index import SearchMatch, VectorIndex


class FakeModelProvider(ModelProvider):
    """Records every call; optionally fails on embed or complete."""

    name = "fake"

    def __init__(self, answer="42", fail_embed=False, fail_complete=False):
        self.answer = answer
        self.fail_embed = fail_embed
        self.fail_complete = fail_complete
        self.embedded = []
        self.prompts = []
        self._embeddings = DeterministicFakeEmbedding(size=8)

    @property
    def embeddings(self):
        return self._embeddings

    def embed(self, text):
        self.embedded.append(text)
        if self.fail_embed:
            raise EmbeddingError("provider unreachable")
        return self._embeddings.embed_query(text)

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.fail_complete:
            raise CompletionError("quota exceeded")
        return self.answer


class FakeIndex(VectorIndex):
    """Returns a fixed list of matches and keeps upserted documents."""

    def __init__(self, matches=None, fail_upsert=False):
        self.matches = matches or []
        self.fail_upsert = fail_upsert
        self.queries = []
        self.documents = []

    def upsert(self, documents, embeddings):
        if self.fail_upsert:
            raise RuntimeError("index unavailable")
        self.documents.extend(documents)
        return len(documents)

    def query(self, vector, top_k):
        self.queries.append((vector, top_k))
        return self.matches[:top_k]


@pytest.fixture
def models():
    return FakeModelProvider()


@pytest.fixture
def history():
    return HistoryBuffer()


@pytest.fixture
def index():
    return FakeIndex(
        matches=[
            SearchMatch(id="a", score=0.7, text="Revenue grew 12% in 2023.", metadata={"page": 1}),
            SearchMatch(id="b", score=0.9, text="The report covers fiscal 2023.", metadata={"page": 0}),
        ]
    )
