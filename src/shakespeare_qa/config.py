"""Configuration management for the Shakespeare Q&A service."""

from typing import Optional
from pydantic import BaseModel
from pydantic_settings import BaseSettings


MIT_SHAKESPEARE_URL = "https://ocw.mit.edu/ans7870/6/6.006/s08/lecturenotes/files/t8.shakespeare.txt"
SHAKESPEARE_GITHUB_RAW = "https://raw.githubusercontent.com/TheMITTech/shakespeare/master"


class ChromaDBConfig(BaseModel):
    """ChromaDB configuration."""
    host: str = "localhost"
    port: int = 8000
    collection_name: str = "shakespeare"


class LLMConfig(BaseModel):
    """LLM provider configuration."""
    provider: str = "openai"  # openai, gemini, demo
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    temperature: float = 0.2


class RankingConfig(BaseModel):
    """Keyword ranking thresholds.

    Keywords must be longer than ``keyword_length_threshold``; candidate
    units must be longer than the per-mode minimum length.
    """
    keyword_length_threshold: int = 2
    line_min_length: int = 20
    sentence_min_length: int = 50
    max_context_chars: int = 2000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Corpus settings
    data_dir: str = "shakespeare_data"
    corpus_url: str = MIT_SHAKESPEARE_URL
    plays_base_url: str = SHAKESPEARE_GITHUB_RAW
    min_cached_length: int = 1000
    fetch_timeout: float = 60.0

    # LLM settings
    llm_provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_embedding_model: str = "text-embedding-3-small"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    temperature: float = 0.2
    fallback_to_demo: bool = True

    # ChromaDB settings
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    collection_name: str = "shakespeare"

    # Chunking settings
    chunk_size: int = 1000
    chunk_overlap: int = 200
    vector_top_k: int = 5

    # Ranking settings
    keyword_length_threshold: int = 2
    line_min_length: int = 20
    sentence_min_length: int = 50
    max_context_chars: int = 2000

    # Logging
    log_level: str = "INFO"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8001

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def chromadb_config(self) -> ChromaDBConfig:
        """Get ChromaDB configuration."""
        return ChromaDBConfig(
            host=self.chroma_host,
            port=self.chroma_port,
            collection_name=self.collection_name
        )

    @property
    def llm_config(self) -> LLMConfig:
        """Get LLM configuration."""
        return LLMConfig(
            provider=self.llm_provider,
            openai_api_key=self.openai_api_key,
            openai_model=self.openai_model,
            gemini_api_key=self.gemini_api_key,
            gemini_model=self.gemini_model,
            temperature=self.temperature
        )

    @property
    def ranking_config(self) -> RankingConfig:
        """Get keyword ranking configuration."""
        return RankingConfig(
            keyword_length_threshold=self.keyword_length_threshold,
            line_min_length=self.line_min_length,
            sentence_min_length=self.sentence_min_length,
            max_context_chars=self.max_context_chars
        )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
