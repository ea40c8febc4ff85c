"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from pdf_chat.config import DEFAULT_OLLAMA_BASE_URL, Settings, env_flag
from pdf_chat.errors import ConfigError

PINECONE = {"PINECONE_API_KEY": "pk", "PINECONE_INDEX_NAME": "docs"}


class TestEnvFlag:
    @pytest.mark.parametrize("value", ["true", "TRUE", " True "])
    def test_true_values(self, value):
        assert env_flag("FLAG", {"FLAG": value}) is True

    @pytest.mark.parametrize("value", ["false", "1", "yes", ""])
    def test_everything_else_is_false(self, value):
        assert env_flag("FLAG", {"FLAG": value}) is False

    def test_missing_is_false(self):
        assert env_flag("FLAG", {}) is False


class TestSettings:
    """Settings.from_env and credential checks."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.upload is False
        assert settings.use_ollama is False
        assert settings.cloud_provider == "gemini"
        assert settings.vector_store == "pinecone"
        assert settings.pdf_path == Path("./sample-report.pdf")
        assert settings.ollama_base_url == DEFAULT_OLLAMA_BASE_URL

    def test_top_k_depends_on_tier(self):
        assert Settings.from_env({"USE_OLLAMA": "true"}).top_k == 3
        assert Settings.from_env({}).top_k == 5

    def test_cloud_requires_gemini_key(self):
        with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
            Settings.from_env(PINECONE).require_credentials()

    def test_openai_cloud_requires_openai_key(self):
        env = {**PINECONE, "CLOUD_PROVIDER": "OpenAI"}
        with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
            Settings.from_env(env).require_credentials()

    def test_pinecone_requires_key_and_index(self):
        with pytest.raises(ConfigError) as excinfo:
            Settings.from_env({"USE_OLLAMA": "true"}).require_credentials()
        assert "PINECONE_API_KEY" in str(excinfo.value)
        assert "PINECONE_INDEX_NAME" in str(excinfo.value)

    def test_ollama_needs_no_cloud_key(self):
        Settings.from_env({**PINECONE, "USE_OLLAMA": "true"}).require_credentials()

    def test_chroma_needs_no_pinecone_key(self):
        Settings.from_env({"VECTOR_STORE": "chroma", "GEMINI_API_KEY": "g"}).require_credentials()

    def test_unknown_vector_store(self):
        with pytest.raises(ConfigError, match="VECTOR_STORE"):
            Settings.from_env({"VECTOR_STORE": "faiss", "USE_OLLAMA": "true"}).require_credentials()
