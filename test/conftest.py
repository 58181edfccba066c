from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gpt_builder.deps import get_assistant_service
from gpt_builder.errors import UpstreamError
from gpt_builder.main import app
from gpt_builder.models import Assistant
from gpt_builder.services.assistant_store import AssistantStore
from gpt_builder.services.assistants import AssistantService
from gpt_builder.services.vector_store import QueryMatch


class FakeEmbedder:
    def __init__(self):
        self.embedded = []

    def embed(self, content):
        self.embedded.append(content)
        return [float(len(content)), 1.0]

    def embed_many(self, texts):
        return [self.embed(t) for t in texts]


class FakeIndex:
    def __init__(self):
        self.upserts = []
        self.queries = []
        self.deleted = []
        self.matches = []
        self.query_error = None

    def upsert(self, vectors):
        self.upserts.append(list(vectors))

    def query(self, vector, assistant_id, top_k=3):
        self.queries.append({"vector": vector, "assistant_id": assistant_id, "top_k": top_k})
        if self.query_error is not None:
            raise self.query_error
        return self.matches[:top_k]

    def delete_for_assistant(self, assistant_id):
        self.deleted.append(assistant_id)
        return 0


class FakeCompleter:
    def __init__(self, answer="Hello from the model"):
        self.answer = answer
        self.calls = []
        self.error = None

    def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.answer


def make_match(text, score, assistant_id="a", index=0):
    return QueryMatch(
        id=f"{assistant_id}-chunk-{index}",
        score=score,
        metadata={"assistantId": assistant_id, "text": text, "chunkIndex": index},
    )


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Assistant.__table__.create(engine)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def fakes():
    return SimpleNamespace(
        embedder=FakeEmbedder(),
        index=FakeIndex(),
        completer=FakeCompleter(),
    )


@pytest.fixture
def service(db_session, fakes):
    return AssistantService(
        store=AssistantStore(db_session),
        embedder=fakes.embedder,
        index=fakes.index,
        completer=fakes.completer,
    )


@pytest.fixture
def client(service):
    app.dependency_overrides[get_assistant_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def upstream_error():
    return UpstreamError(detail="upstream exploded")
