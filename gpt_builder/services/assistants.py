#gpt_builder/services/assistants.py

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from gpt_builder.errors import UpstreamError, ValidationError
from gpt_builder.models import Assistant
from gpt_builder.utils.logging import logger, log_event

from .assistant_store import AssistantStore
from .chunker import decode_document, split_paragraphs
from .completion import CompletionClient, build_messages
from .embeddings import Embedder
from .vector_store import DEFAULT_TOP_K, ChunkVector, VectorIndex

FALLBACK_RESPONSE = "Sorry, I could not generate a response."


@dataclass
class DocumentUpload:
    file_name: str
    content: bytes


class AssistantService:
    """
    Create and chat workflows over the store, embedder, vector index and
    completion client. Collaborators are passed in so tests can swap them.
    """

    def __init__(
        self,
        store: AssistantStore,
        embedder: Embedder,
        index: VectorIndex,
        completer: CompletionClient,
    ):
        self.store = store
        self.embedder = embedder
        self.index = index
        self.completer = completer

    # ---------------------------
    # Create
    # ---------------------------
    def create(
        self,
        name: Optional[str],
        description: Optional[str],
        instructions: Optional[str],
        upload: Optional[DocumentUpload] = None,
    ) -> str:
        if not all(v and v.strip() for v in (name, description, instructions)):
            logger.warning("Create rejected: missing required fields")
            raise ValidationError()

        gpt_id = str(uuid.uuid4())
        document_data = None
        upserted = False

        if upload is not None:
            logger.info(f"Processing file: {upload.file_name} for gpt_id={gpt_id}")
            chunks = split_paragraphs(decode_document(upload.content))
            if chunks:
                self._ingest_chunks(gpt_id, chunks)
                upserted = True
                document_data = {
                    "fileName": upload.file_name,
                    "chunkCount": len(chunks),
                    "processed": True,
                }
            else:
                logger.warning(f"No qualifying chunks in {upload.file_name}; creating gpt_id={gpt_id} without knowledge")

        try:
            self.store.create(
                id=gpt_id,
                name=name,
                description=description,
                instructions=instructions,
                document_data=document_data,
            )
        except UpstreamError:
            if upserted:
                self._compensate(gpt_id)
            raise

        logger.info(f"GPT created gpt_id={gpt_id}")
        return gpt_id

    def _ingest_chunks(self, gpt_id: str, chunks: List[str]) -> None:
        vectors = self.embedder.embed_many(chunks)
        self.index.upsert(
            [ChunkVector.for_chunk(gpt_id, i, chunk, values) for i, (chunk, values) in enumerate(zip(chunks, vectors))]
        )
        logger.info(f"Stored {len(chunks)} chunk vectors for gpt_id={gpt_id}")

    def _compensate(self, gpt_id: str) -> None:
        # Record write failed after upsert: remove the vectors we just wrote.
        try:
            self.index.delete_for_assistant(gpt_id)
        except UpstreamError:
            log_event("orphaned_vectors", logging.ERROR, assistant_id=gpt_id)

    # ---------------------------
    # Read / delete
    # ---------------------------
    def list(self) -> List[Assistant]:
        return self.store.list()

    def get(self, gpt_id: str) -> Assistant:
        return self.store.get_by_id(gpt_id)

    def delete(self, gpt_id: str) -> None:
        self.index.delete_for_assistant(gpt_id)
        self.store.delete_by_id(gpt_id)

    # ---------------------------
    # Chat
    # ---------------------------
    def retrieve_context(self, gpt_id: str, message: str) -> str:
        """
        Top-3 chunk texts for this assistant joined by blank lines.
        Retrieval failures degrade to "" so the conversation continues ungrounded.
        """
        try:
            query_vector = self.embedder.embed(message)
            matches = self.index.query(query_vector, assistant_id=gpt_id, top_k=DEFAULT_TOP_K)
        except Exception as exc:
            log_event(
                "retrieval_degraded",
                logging.WARNING,
                assistant_id=gpt_id,
                error=type(exc).__name__,
                detail=repr(str(exc)),
            )
            return ""
        texts = [m.metadata.get("text") for m in matches]
        return "\n\n".join(t for t in texts if t)

    def chat(self, gpt_id: str, message: str, history: Optional[Sequence[Dict[str, str]]] = None) -> str:
        gpt = self.store.get_by_id(gpt_id)

        context_text = ""
        if (gpt.document_data or {}).get("processed"):
            context_text = self.retrieve_context(gpt_id, message)
            logger.info(f"Context for gpt_id={gpt_id}: {len(context_text)} chars")

        messages = build_messages(gpt.instructions, context_text, history, message)
        answer = self.completer.complete(messages)
        if not answer:
            logger.warning(f"Empty completion for gpt_id={gpt_id}; using fallback response")
            return FALLBACK_RESPONSE
        return answer
