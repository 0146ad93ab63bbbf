"""Pytest fixtures for AgriCraft tests."""

from __future__ import annotations

import os
from io import BytesIO
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from PIL import Image
from pymongo import DESCENDING


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    # equality-only; operator queries are covered by build_product_query tests
    return all(doc.get(k) == v for k, v in query.items())


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    out = dict(doc)
    if projection and projection.get("_id") == 0:
        out.pop("_id", None)
    return out


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d[key], reverse=direction == DESCENDING)
        return self

    async def to_list(self, length=None) -> List[Dict[str, Any]]:
        return list(self._docs)


class FakeCollection:
    """Just enough of motor's AsyncIOMotorCollection for the repository."""

    def __init__(self) -> None:
        self.docs: List[Dict[str, Any]] = []

    async def insert_one(self, doc: Dict[str, Any]):
        doc["_id"] = len(self.docs) + 1
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query: Dict[str, Any], projection=None) -> FakeCursor:
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, query)])

    async def find_one(self, query: Dict[str, Any], projection=None):
        for d in self.docs:
            if _matches(d, query):
                return _project(d, projection)
        return None

    async def find_one_and_update(self, query, update, projection=None, return_document=None):
        for d in self.docs:
            if _matches(d, query):
                d.update(update["$set"])
                return _project(d, projection)
        return None

    async def delete_one(self, query):
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDB(dict):
    def __missing__(self, name: str) -> FakeCollection:
        self[name] = FakeCollection()
        return self[name]


def make_image_bytes(size=(400, 200), fmt: str = "PNG", noise: bool = True) -> bytes:
    """Random noise compresses badly, which keeps test images reliably large."""
    w, h = size
    if noise:
        img = Image.frombytes("RGB", size, os.urandom(w * h * 3))
    else:
        img = Image.new("RGB", size, (120, 180, 60))
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture
def noisy_png() -> bytes:
    return make_image_bytes()


@pytest.fixture
def small_png() -> bytes:
    return make_image_bytes(size=(32, 32), noise=False)
