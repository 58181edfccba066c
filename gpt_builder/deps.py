from functools import lru_cache

from fastapi import Depends
from openai import OpenAI
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from gpt_builder.config import get_settings
from gpt_builder.db import get_db, get_engine
from gpt_builder.services.assistant_store import AssistantStore
from gpt_builder.services.assistants import AssistantService
from gpt_builder.services.completion import CompletionClient
from gpt_builder.services.embeddings import Embedder
from gpt_builder.services.vector_store import VectorIndex
from gpt_builder.utils.logging import logger


@lru_cache
def get_embedder() -> Embedder:
    settings = get_settings()
    logger.info(f"Creating embedding client: model={settings.embedding_model}")
    return Embedder(OpenAI(api_key=settings.openai_api_key), model=settings.embedding_model)


@lru_cache
def get_completion_client() -> CompletionClient:
    settings = get_settings()
    logger.info(f"Creating completion client: model={settings.chat_model}, base_url={settings.openrouter_base_url}")
    client = OpenAI(api_key=settings.openrouter_api_key, base_url=settings.openrouter_base_url)
    return CompletionClient(client, model=settings.chat_model, max_tokens=settings.max_tokens)


@lru_cache
def get_vector_index() -> VectorIndex:
    settings = get_settings()
    if settings.vector_url == settings.database_url:
        engine = get_engine()
    else:
        engine = create_engine(settings.vector_url, echo=False, future=True, pool_pre_ping=True)
        logger.info("Vector database engine created")
    return VectorIndex(engine, index_name=settings.vector_index_name, dim=settings.embedding_dim)


def get_assistant_service(db: Session = Depends(get_db)) -> AssistantService:
    return AssistantService(
        store=AssistantStore(db),
        embedder=get_embedder(),
        index=get_vector_index(),
        completer=get_completion_client(),
    )
