"""Shared pytest fixtures."""

from copy import deepcopy
from types import SimpleNamespace
from typing import Any

import bcrypt
import pytest
import pytest_asyncio

from notethread.app import App
from notethread.config import Config
from notethread.core.core import Services
from notethread.core.modules.comment.models import ClientInfo


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(doc, sub_query) for sub_query in condition):
                return False
        elif isinstance(condition, dict) and "$in" in condition:
            if doc.get(key) not in condition["$in"]:
                return False
        elif doc.get(key) != condition:
            return False
    return True


def _apply_update(doc: dict[str, Any], update: dict[str, Any]) -> None:
    for key, value in update.get("$set", {}).items():
        doc[key] = value
    for key, value in update.get("$inc", {}).items():
        doc[key] = doc.get(key, 0) + value


class FakeCursor:
    """Subset of AsyncCursor: sort, skip, limit, async iteration."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def sort(self, key_or_list, direction=None):
        keys = [(key_or_list, direction)] if isinstance(key_or_list, str) else list(key_or_list)
        # Stable sorts applied from the last key to the first give a multi-key sort
        for key, key_direction in reversed(keys):
            self._docs.sort(key=lambda doc, k=key: doc.get(k), reverse=key_direction == -1)
        return self

    def skip(self, count):
        self._skip = count
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _result(self) -> list[dict[str, Any]]:
        docs = self._docs[self._skip :]
        if self._limit:
            docs = docs[: self._limit]
        return [deepcopy(doc) for doc in docs]

    async def to_list(self, length=None):
        return self._result()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._result():
            yield doc


class FakeCollection:
    """In-memory stand-in for AsyncCollection, covering the queries the services issue."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.delete_many_calls: list[dict[str, Any]] = []
        self._auto_id = 0

    async def create_index(self, keys, **kwargs):
        return "index"

    async def insert_one(self, document):
        self.docs.append(deepcopy(document))
        return SimpleNamespace(inserted_id=document.get("_id"))

    def find(self, query=None):
        return FakeCursor([doc for doc in self.docs if _matches(doc, query or {})])

    async def find_one(self, query=None, sort=None):
        cursor = self.find(query)
        if sort:
            cursor.sort(sort)
        docs = await cursor.limit(1).to_list()
        return docs[0] if docs else None

    async def count_documents(self, query, limit=0):
        count = sum(1 for doc in self.docs if _matches(doc, query))
        return min(count, limit) if limit else count

    async def update_one(self, query, update):
        doc = next((doc for doc in self.docs if _matches(doc, query)), None)
        if doc is not None:
            _apply_update(doc, update)
        return SimpleNamespace(matched_count=0 if doc is None else 1)

    async def find_one_and_update(self, query, update, upsert=False, return_document=None):
        doc = next((doc for doc in self.docs if _matches(doc, query)), None)
        if doc is None:
            if not upsert:
                return None
            self._auto_id += 1
            doc = {"_id": f"auto-{self._auto_id}", **{k: v for k, v in query.items() if not k.startswith("$")}}
            self.docs.append(doc)
        _apply_update(doc, update)
        return deepcopy(doc)

    async def delete_one(self, query):
        doc = next((doc for doc in self.docs if _matches(doc, query)), None)
        if doc is not None:
            self.docs.remove(doc)
        return SimpleNamespace(deleted_count=0 if doc is None else 1)

    async def delete_many(self, query):
        self.delete_many_calls.append(query)
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted_count = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted_count)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeCore:
    """Core wired to the in-memory database instead of a MongoDB client."""

    def __init__(self, config: Config, database: FakeDatabase) -> None:
        self.config = config
        self.database = database
        self.services = Services(database)  # type: ignore[arg-type]
        self.services.set_core(self)  # type: ignore[arg-type]


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the cheapest bcrypt cost so account fixtures stay fast."""
    gensalt = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda: gensalt(rounds=4))


@pytest.fixture
def config():
    return Config(
        database_url="mongodb://localhost:27017/notethread_test",
        host="127.0.0.1",
        port=3100,
        debug=True,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest_asyncio.fixture
async def core(config, database):
    fake_core = FakeCore(config, database)
    await fake_core.services.start_all()
    return fake_core


@pytest.fixture
def services(core):
    return core.services


@pytest.fixture
def comments_collection(database):
    return database.get_collection("comments")


@pytest_asyncio.fixture
async def alice(services):
    return await services.account.create_account("alice", "secret1", nickname="Alice", image="https://img.test/alice.png")


@pytest_asyncio.fixture
async def bob(services):
    return await services.account.create_account("bob", "secret2")


@pytest_asyncio.fixture
async def note(services, alice):
    return await services.note.create_note(alice.id, "Published note about threaded comments")


@pytest.fixture
def guest_client():
    return ClientInfo(address="1.2.3.4", user_agent="UA1")


@pytest.fixture
def app_instance(core):
    """App facade on top of the in-memory core."""
    app = App.__new__(App)
    app._core = core
    return app
