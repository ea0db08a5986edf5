"""Application configuration and .env loading."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    running_mode: Literal[
        "chat",
        "embeddings",
        "reranker",
        "chat_embedding",
        "chat_embedding_reranker",
    ] = Field(default="reranker", validation_alias="RUNNING_MODE")

    reranker_model_id: str = Field(
        default="BAAI/bge-reranker-base", validation_alias="RERANKER_MODEL_ID"
    )
    reranker_model_name: str | None = Field(
        default=None, validation_alias="RERANKER_MODEL_NAME"
    )
    reranker_device: str | None = Field(default=None, validation_alias="RERANKER_DEVICE")
    reranker_max_length: int = Field(
        default=512, ge=1, validation_alias="RERANKER_MAX_LENGTH"
    )
    reranker_input_style: Literal["document_only", "query_and_document"] = Field(
        default="query_and_document", validation_alias="RERANKER_INPUT_STYLE"
    )
    reranker_output_style: Literal["placeholder", "structured_json"] = Field(
        default="structured_json", validation_alias="RERANKER_OUTPUT_STYLE"
    )
    reranker_separator: str = Field(
        default="</s></s>", validation_alias="RERANKER_SEPARATOR"
    )
    reranker_lock_timeout: float | None = Field(
        default=None, validation_alias="RERANKER_LOCK_TIMEOUT"
    )
    reranker_preload: bool = Field(default=True, validation_alias="RERANKER_PRELOAD")

    hf_token: str | None = Field(default=None, validation_alias="HF_TOKEN")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def resolved_model_name(self) -> str:
        """Name the reranker graph is registered under."""
        if self.reranker_model_name:
            return self.reranker_model_name
        return self.reranker_model_id.rsplit("/", 1)[-1]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
