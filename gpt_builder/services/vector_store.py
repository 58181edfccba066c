#gpt_builder/services/vector_store.py

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from pgvector.sqlalchemy import Vector
from sqlalchemy import Column, Integer, MetaData, Table, Text, delete, select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from gpt_builder.errors import UpstreamError
from gpt_builder.utils.logging import logger

DEFAULT_TOP_K = 3

_INDEX_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


@dataclass
class ChunkVector:
    id: str
    values: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_chunk(cls, assistant_id: str, index: int, chunk: str, values: List[float]) -> "ChunkVector":
        return cls(
            id=f"{assistant_id}-chunk-{index}",
            values=values,
            metadata={"assistantId": assistant_id, "text": chunk, "chunkIndex": index},
        )


@dataclass
class QueryMatch:
    id: str
    score: float
    metadata: Dict[str, Any]


def chunk_table(index_name: str, dim: int, metadata: MetaData | None = None) -> Table:
    if not _INDEX_NAME_RE.match(index_name):
        raise ValueError(f"Invalid vector index name: {index_name!r}")
    return Table(
        index_name,
        metadata if metadata is not None else MetaData(),
        Column("id", Text, primary_key=True),
        Column("assistant_id", Text, nullable=False, index=True),
        Column("chunk_index", Integer, nullable=False),
        Column("text", Text, nullable=False),
        Column("embedding", Vector(dim), nullable=False),
    )


class VectorIndex:
    """
    A named pgvector table acting as the vector index.
    Rows are keyed by chunk id and carry assistant_id/text/chunk_index as metadata.
    """

    def __init__(self, engine: Engine, index_name: str = "gpt_chunks", dim: int = 1536):
        self.engine = engine
        self.index_name = index_name
        self.dim = dim
        self.table = chunk_table(index_name, dim)
        logger.debug(f"VectorIndex instance created for index={index_name}, dim={dim}")

    def ensure_index(self) -> None:
        logger.info(f"Ensuring vector index table '{self.index_name}' exists")
        try:
            with self.engine.begin() as conn:
                conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                self.table.metadata.create_all(conn, tables=[self.table])
        except SQLAlchemyError as exc:
            logger.exception(f"Error creating vector index '{self.index_name}': {exc}")
            raise UpstreamError(detail=str(exc)) from exc

    def upsert(self, vectors: Sequence[ChunkVector]) -> None:
        if not vectors:
            return
        logger.info(f"Upserting {len(vectors)} vectors into index={self.index_name}")
        rows = [
            {
                "id": v.id,
                "assistant_id": v.metadata["assistantId"],
                "chunk_index": v.metadata["chunkIndex"],
                "text": v.metadata["text"],
                "embedding": v.values,
            }
            for v in vectors
        ]
        stmt = pg_insert(self.table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[self.table.c.id],
            set_={
                "assistant_id": stmt.excluded.assistant_id,
                "chunk_index": stmt.excluded.chunk_index,
                "text": stmt.excluded.text,
                "embedding": stmt.excluded.embedding,
            },
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception(f"Error upserting vectors into {self.index_name}: {exc}")
            raise UpstreamError(detail=str(exc)) from exc
        logger.debug("Vector upsert committed")

    def query(self, vector: List[float], assistant_id: str, top_k: int = DEFAULT_TOP_K) -> List[QueryMatch]:
        """
        Cosine nearest neighbours restricted to one assistant, best first.
        Every match is returned regardless of how low its score is.
        """
        logger.info(f"Querying top_k={top_k} from index={self.index_name} for assistant_id={assistant_id}")
        distance = self.table.c.embedding.cosine_distance(vector)
        stmt = (
            select(
                self.table.c.id,
                self.table.c.assistant_id,
                self.table.c.chunk_index,
                self.table.c.text,
                (1 - distance).label("score"),
            )
            .where(self.table.c.assistant_id == assistant_id)
            .order_by(distance)
            .limit(top_k)
        )
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as exc:
            logger.exception(f"Error querying {self.index_name}: {exc}")
            raise UpstreamError(detail=str(exc)) from exc

        logger.info(f"query returned {len(rows)} matches")
        return [
            QueryMatch(
                id=row.id,
                score=float(row.score),
                metadata={
                    "assistantId": row.assistant_id,
                    "text": row.text,
                    "chunkIndex": row.chunk_index,
                },
            )
            for row in rows
        ]

    def delete_for_assistant(self, assistant_id: str) -> int:
        logger.info(f"Deleting vectors for assistant_id={assistant_id} from index={self.index_name}")
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    delete(self.table).where(self.table.c.assistant_id == assistant_id)
                )
        except SQLAlchemyError as exc:
            logger.exception(f"Error deleting vectors for assistant_id={assistant_id}: {exc}")
            raise UpstreamError(detail=str(exc)) from exc
        logger.info(f"Deleted {result.rowcount} vectors for assistant_id={assistant_id}")
        return result.rowcount
