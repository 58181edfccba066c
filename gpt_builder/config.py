from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from gpt_builder.utils.logging import logger


class Settings(BaseSettings):
    database_url: str
    vector_database_url: Optional[str] = None
    vector_index_name: str = "gpt_chunks"
    embedding_dim: int = 1536

    openai_api_key: str
    embedding_model: str = "text-embedding-ada-002"

    openrouter_api_key: str
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    chat_model: str = "anthropic/claude-3-haiku:beta"
    max_tokens: int = 1500

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any truly extra env vars
    )

    @property
    def vector_url(self) -> str:
        return self.vector_database_url or self.database_url


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    logger.info("Settings loaded successfully from environment/.env")
    return settings
