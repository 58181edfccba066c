from typing import List, Sequence

from openai import OpenAI, OpenAIError

from gpt_builder.errors import UpstreamError
from gpt_builder.executor import executor
from gpt_builder.utils.logging import logger


class Embedder:
    def __init__(self, client: OpenAI, model: str = "text-embedding-ada-002"):
        self.client = client
        self.model = model

    def embed(self, content: str) -> List[float]:
        logger.info(f"Creating embedding for content length={len(content)}")
        try:
            resp = self.client.embeddings.create(model=self.model, input=content)
            embedding = resp.data[0].embedding
        except OpenAIError as exc:
            logger.exception(f"Embedding creation failed: {exc}")
            raise UpstreamError(detail=str(exc)) from exc
        logger.debug(f"Embedding created successfully; dim={len(embedding)}")
        return embedding

    def embed_many(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed every text with one request each, fanned out on the shared pool.
        Results come back in input order; any single failure fails the batch.
        """
        logger.info(f"Embedding {len(texts)} texts concurrently")
        futures = [executor.submit(self.embed, t) for t in texts]
        try:
            vectors = [f.result() for f in futures]
        except Exception:
            for f in futures:
                f.cancel()
            raise
        logger.info(f"Embedded {len(vectors)} texts")
        return vectors
