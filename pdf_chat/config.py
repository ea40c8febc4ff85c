"""Application configuration loaded from environment."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from pdf_chat.errors import ConfigError

load_dotenv()

# Paths
BASE_DIR = Path.cwd()
DEFAULT_PDF_PATH = "./sample-report.pdf"
CHROMA_DIR = BASE_DIR / "chroma_db"

# Chunking
CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200

# Upload
UPLOAD_CONCURRENCY = 5
UPLOAD_BATCH_SIZE = 32

# Retrieval (fewer results on the local tier for faster responses)
LOCAL_TOP_K = 3
CLOUD_TOP_K = 5
CONTEXT_SEPARATOR = "\n\n---\n\n"

# Conversation history
HISTORY_LIMIT = 5

# Gemini
GEMINI_EMBEDDING_MODEL = "models/text-embedding-004"
GEMINI_LLM_MODEL = "gemini-2.0-flash-exp"

# OpenAI
OPENAI_EMBEDDING_MODEL = "text-embedding-3-small"
OPENAI_LLM_MODEL = "gpt-4o-mini"

# Ollama
DEFAULT_OLLAMA_BASE_URL = "http://127.0.0.1:11434"
OLLAMA_EMBEDDING_MODEL = "nomic-embed-text"
OLLAMA_LLM_MODEL = "llama3.2"
OLLAMA_TIMEOUT_SECONDS = 30
OLLAMA_NUM_CTX = 4096

LLM_TEMPERATURE = 0.3

# Chroma collection name (local vector store)
CHROMA_COLLECTION_NAME = "pdf_chat_docs"

CLOUD_PROVIDERS = ("gemini", "openai")
VECTOR_STORES = ("pinecone", "chroma")


def env_flag(name: str, environ=None) -> bool:
    """True only when the variable is literally 'true' (any case)."""
    environ = os.environ if environ is None else environ
    return (environ.get(name) or "").strip().lower() == "true"


class Settings(BaseModel):
    """Runtime settings chosen once at startup."""

    pinecone_api_key: str | None = None
    pinecone_index_name: str | None = None
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    upload: bool = False
    use_ollama: bool = False
    cloud_provider: str = "gemini"
    vector_store: str = "pinecone"
    pdf_path: Path = Path(DEFAULT_PDF_PATH)
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL
    log_level: str = "INFO"
    chroma_dir: Path = Field(default=CHROMA_DIR)

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        environ = os.environ if environ is None else environ
        return cls(
            pinecone_api_key=environ.get("PINECONE_API_KEY") or None,
            pinecone_index_name=environ.get("PINECONE_INDEX_NAME") or None,
            gemini_api_key=environ.get("GEMINI_API_KEY") or None,
            openai_api_key=environ.get("OPENAI_API_KEY") or None,
            upload=env_flag("UPLOAD_TO_PINECONE", environ),
            use_ollama=env_flag("USE_OLLAMA", environ),
            cloud_provider=(environ.get("CLOUD_PROVIDER") or "gemini").strip().lower(),
            vector_store=(environ.get("VECTOR_STORE") or "pinecone").strip().lower(),
            pdf_path=Path(environ.get("PDF_PATH") or DEFAULT_PDF_PATH),
            ollama_base_url=environ.get("OLLAMA_BASE_URL") or DEFAULT_OLLAMA_BASE_URL,
            log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        )

    @property
    def top_k(self) -> int:
        return LOCAL_TOP_K if self.use_ollama else CLOUD_TOP_K

    @property
    def model_tier(self) -> str:
        return "ollama" if self.use_ollama else self.cloud_provider

    def require_credentials(self) -> None:
        """Raise ConfigError listing every missing or unknown setting."""
        problems = []
        if self.vector_store not in VECTOR_STORES:
            problems.append(f"VECTOR_STORE must be one of {VECTOR_STORES}, got {self.vector_store!r}")
        elif self.vector_store == "pinecone":
            if not self.pinecone_api_key:
                problems.append("PINECONE_API_KEY must be set in .env")
            if not self.pinecone_index_name:
                problems.append("PINECONE_INDEX_NAME must be set in .env")

        if not self.use_ollama:
            if self.cloud_provider not in CLOUD_PROVIDERS:
                problems.append(
                    f"CLOUD_PROVIDER must be one of {CLOUD_PROVIDERS}, got {self.cloud_provider!r}"
                )
            elif self.cloud_provider == "gemini" and not self.gemini_api_key:
                problems.append("GEMINI_API_KEY must be set in .env (or set USE_OLLAMA=true)")
            elif self.cloud_provider == "openai" and not self.openai_api_key:
                problems.append("OPENAI_API_KEY must be set in .env (or set USE_OLLAMA=true)")

        if problems:
            raise ConfigError("; ".join(problems))
