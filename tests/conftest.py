"""Shared pytest fixtures.

Services talk to MongoDB through a handful of collection methods; the
in-memory database below implements just those, with unique-index checks
raising pymongo's own DuplicateKeyError.
"""

import copy
from dataclasses import dataclass
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from boxingcoach.app import App
from boxingcoach.config import Config
from boxingcoach.core.core import Core
from boxingcoach.web.server import create_fastapi_app


@dataclass
class InsertOneResult:
    inserted_id: Any


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(key in doc and doc[key] == value for key, value in query.items())


class InMemoryCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "InMemoryCursor":
        self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def skip(self, count: int) -> "InMemoryCursor":
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> "InMemoryCursor":
        if count:
            self._docs = self._docs[:count]
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield copy.deepcopy(doc)


class InMemoryCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self._unique_keys: list[tuple[str, ...]] = [("_id",)]

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        fields = tuple(field for field, _ in keys)
        if unique:
            self._unique_keys.append(fields)
        return "_".join(f"{field}_{direction}" for field, direction in keys)

    def _check_unique(self, candidate: dict[str, Any], exclude: dict[str, Any] | None = None) -> None:
        for fields in self._unique_keys:
            for doc in self.docs:
                if doc is exclude:
                    continue
                if all(doc.get(field) == candidate.get(field) for field in fields):
                    raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} index: {fields}")

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        self._check_unique(document)
        self.docs.append(copy.deepcopy(document))
        return InsertOneResult(inserted_id=document["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict[str, Any] | None = None) -> InMemoryCursor:
        return InMemoryCursor([doc for doc in self.docs if _matches(doc, query or {})])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for doc in self.docs if _matches(doc, query))

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        for doc in self.docs:
            if _matches(doc, query):
                changes = update["$set"]
                self._check_unique({**doc, **changes}, exclude=doc)
                doc.update(copy.deepcopy(changes))
                return UpdateResult(matched_count=1, modified_count=1)
        return UpdateResult(matched_count=0, modified_count=0)


class InMemoryDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, InMemoryCollection] = {}

    def get_collection(self, name: str) -> InMemoryCollection:
        if name not in self.collections:
            self.collections[name] = InMemoryCollection(name)
        return self.collections[name]


@pytest.fixture
def config():
    """Development config with a fixed secret and the cheapest bcrypt work factor."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/boxingcoach_test",
        environment="development",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def database():
    return InMemoryDatabase()


@pytest.fixture
def core(config, database):
    return Core(config, database)


@pytest.fixture
def app_instance(config, database):
    return App(config, database)


@pytest.fixture
def client(app_instance, config):
    """Test client with the application lifespan (index creation) running."""
    with TestClient(create_fastapi_app(app_instance, config)) as test_client:
        yield test_client


@pytest.fixture
def signup(client):
    """Register a user through the API and return the response body."""

    def _signup(email: str = "a@b.com", password: str = "secret123", full_name: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"email": email, "password": password}
        if full_name is not None:
            payload["full_name"] = full_name
        response = client.post("/api/v1/auth/signup", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _signup
