from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from gpt_builder.config import get_settings
from gpt_builder.utils.logging import logger


class Base(DeclarativeBase):
    pass


@lru_cache
def get_engine() -> Engine:
    engine = create_engine(get_settings().database_url, echo=False, future=True, pool_pre_ping=True)
    logger.info("Database engine created")
    return engine


@lru_cache
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)


def get_db():
    db = get_sessionmaker()()
    logger.debug("DB session created")
    try:
        yield db
    except Exception as exc:
        logger.exception(f"Error during DB session usage: {exc}")
        raise
    finally:
        db.close()
        logger.debug("DB session closed")
