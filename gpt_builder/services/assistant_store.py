# gpt_builder/services/assistant_store.py

from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gpt_builder.errors import NotFoundError, UpstreamError
from gpt_builder.models import Assistant
from gpt_builder.utils.logging import logger


class AssistantStore:
    """CRUD over the ``gpts`` table. One round-trip per call, no retries."""

    def __init__(self, db: Session):
        self.db = db
        logger.debug("AssistantStore instance created")

    def create(
        self,
        id: str,
        name: str,
        description: str,
        instructions: str,
        document_data: Optional[dict] = None,
    ) -> Assistant:
        logger.info(f"Inserting assistant id={id}, name={name!r}, has_document={document_data is not None}")
        row = Assistant(
            id=id,
            name=name,
            description=description,
            instructions=instructions,
            document_data=document_data,
            status="active",
        )
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Error inserting assistant id={id}: {exc}")
            raise UpstreamError("Failed to save GPT", detail=str(exc)) from exc
        logger.debug(f"Assistant id={id} committed")
        return row

    def get_by_id(self, id: str) -> Assistant:
        logger.info(f"Fetching assistant id={id}")
        try:
            row = self.db.get(Assistant, id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Error fetching assistant id={id}: {exc}")
            raise UpstreamError(detail=str(exc)) from exc
        if row is None:
            logger.warning(f"Assistant not found id={id}")
            raise NotFoundError()
        return row

    def list(self) -> List[Assistant]:
        logger.info("Listing assistants")
        try:
            rows = self.db.execute(
                select(Assistant).order_by(Assistant.created_at.desc())
            ).scalars().all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Error listing assistants: {exc}")
            raise UpstreamError("Failed to fetch GPTs", detail=str(exc)) from exc
        logger.info(f"list returned {len(rows)} assistants")
        return list(rows)

    def delete_by_id(self, id: str) -> None:
        logger.info(f"Deleting assistant id={id}")
        try:
            result = self.db.execute(delete(Assistant).where(Assistant.id == id))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Error deleting assistant id={id}: {exc}")
            raise UpstreamError("Failed to delete GPT", detail=str(exc)) from exc
        logger.info(f"Deleted {result.rowcount} assistant row(s) for id={id}")
