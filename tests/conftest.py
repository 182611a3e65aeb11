"""Shared fixtures: in-memory database, fake AI client, fake news source."""

import json
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import neuroblog.models  # noqa: F401
from neuroblog.config import Settings
from neuroblog.database import Base, get_db
from neuroblog.models.post import Post
from neuroblog.models.suggestion import Suggestion
from neuroblog.models.user import User
from neuroblog.services.authz import Principal
from neuroblog.services.news_sources import TopicItem, make_unique_id
from neuroblog.services.passwords import hash_password


LONG_BODY = "## Introduction\n\n" + ("Quantum hardware keeps getting better. " * 40)


def ai_json(title="The Future of Edge Computing", content=LONG_BODY, **extra) -> str:
    data = {
        "title": title,
        "summary": "A short summary.",
        "content": content,
        "tags": ["technology", "analysis"],
        "category": "Technology",
        "featured": True,
        "readTime": "10-15 min read",
        "publishDate": "July 23, 2025",
    }
    data.update(extra)
    return json.dumps(data)


def make_topic(title="Quantum Computing Breakthroughs", source="Science Today", category="Technology", url=None):
    return TopicItem(
        title=title,
        description=f"Latest developments around {title.lower()}.",
        source=source,
        url=url,
        category=category,
        unique_id=make_unique_id(title, category),
    )


class FakeGenerator:
    """Stands in for GenerativeClient. Returns queued responses, or raises queued exceptions."""

    def __init__(self, responses=None, default=None):
        self.responses = list(responses or [])
        self.default = default if default is not None else ai_json()
        self.prompts = []

    async def generate(self, prompt, max_attempts=None, temperature=0.7, max_tokens=4096):
        self.prompts.append(prompt)
        item = self.responses.pop(0) if self.responses else self.default
        if isinstance(item, Exception):
            raise item
        return item


class FakeAggregator:
    def __init__(self, topics=None):
        self.topics = list(topics or [])
        self.calls = 0

    async def fetch_topics(self):
        self.calls += 1
        return list(self.topics)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def settings():
    return Settings(auto_generation_enabled=False, pexels_api_key="", news_api_key="")


@pytest.fixture
def admin_principal():
    return Principal(user_id=None, role="admin", is_system=True, username="admin")


@pytest.fixture
def admin_user(db):
    u = User(username="editor", email="editor@example.com", password_hash=hash_password("secret123"), role="admin")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def plain_user(db):
    u = User(username="reader", email="reader@example.com", password_hash=hash_password("secret123"), role="user")
    db.add(u)
    db.commit()
    return u


def add_suggestion(db, title="Existing suggestion", status="pending", **kw) -> Suggestion:
    s = Suggestion(
        title=title,
        content=kw.pop("content", "body"),
        summary=kw.pop("summary", "summary"),
        tags=kw.pop("tags", ["ai"]),
        category=kw.pop("category", "Technology"),
        source=kw.pop("source", "Tech News - something"),
        status=status,
        **kw,
    )
    db.add(s)
    db.commit()
    return s


def add_post(db, author, title="Existing post", **kw) -> Post:
    p = Post(
        title=title,
        body=kw.pop("body", "body"),
        author_id=author.id,
        status=kw.pop("status", "published"),
        tags=kw.pop("tags", []),
        reactions=[],
        **kw,
    )
    db.add(p)
    db.commit()
    return p


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def fake_aggregator():
    return FakeAggregator([make_topic()])


@pytest.fixture
def container(settings, session_factory, fake_generator, fake_aggregator):
    from neuroblog.services.container import build_container

    return build_container(settings, session_factory, generator=fake_generator, aggregator=fake_aggregator)


@pytest.fixture
def client(settings, container, session_factory):
    from neuroblog.main import create_app

    app = create_app(settings=settings, container=container)

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c


def login(client, login_name, password) -> dict:
    """Log in and return an Authorization header; cookies are dropped so each call says who it is."""
    r = client.post("/auth/login", json={"login": login_name, "password": password})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {r.json()['token']}"}


def random_id() -> str:
    return str(uuid.uuid4())
