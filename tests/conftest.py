"""
Fixtures compartidas.

Los vectores de prueba son 2-D: el semilla usa [1, 0] en cada eje y un
candidato con similitud `s` usa [s, sqrt(1 - s²)], así el coseno por eje
es exactamente `s`.
"""

import hashlib
import math
from datetime import date
from typing import Optional

import pytest

from identity_matcher.database import InMemoryStore
from identity_matcher.errors import EmbeddingProviderError
from identity_matcher.matching import MatchingEngine
from identity_matcher.models import AXES, Axis, GeoPoint, Profile

TODAY = date(2026, 6, 15)
SEED_VECTOR = [1.0, 0.0]


def vector_with_similarity(similarity: float) -> list[float]:
    return [similarity, math.sqrt(max(0.0, 1.0 - similarity * similarity))]


def profile_with_similarities(user_id: str, similarities: dict[Axis, Optional[float]]) -> Profile:
    data = {"user_id": user_id}
    for axis in AXES:
        similarity = similarities.get(axis)
        data[f"{axis.value}_desc"] = f"{axis.value} de {user_id}."
        data[f"{axis.value}_embedding"] = (
            None if similarity is None else vector_with_similarity(similarity)
        )
    return Profile(**data)


class FakeEmbedder:
    """Embeddings deterministas derivados del hash del texto."""

    def __init__(self, dim: int = 8):
        self.dim = dim
        self.calls: list[list[str]] = []
        self.fail = False

    @staticmethod
    def vector_for(text: str, dim: int = 8) -> list[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(byte - 127.5) / 127.5 for byte in digest[:dim]]

    async def embed(self, text: str) -> list[float]:
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail:
            raise EmbeddingProviderError("proveedor caído", attempts=3)
        return [self.vector_for(text, self.dim) for text in texts]


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def add_candidate(store):
    """Registra usuario + perfil con similitudes controladas contra el semilla."""

    def _add(
        user_id: str,
        similarities=None,
        gender: str = "woman",
        birthdate: date = date(1995, 1, 1),
        location: Optional[GeoPoint] = None,
    ) -> Profile:
        if similarities is None:
            similarities = {axis: 0.5 for axis in AXES}
        elif not isinstance(similarities, dict):
            similarities = {axis: similarities for axis in AXES}
        store.add_user(user_id, gender=gender, birthdate=birthdate, location=location)
        profile = profile_with_similarities(user_id, similarities)
        store._profiles[user_id] = profile
        return profile

    return _add


@pytest.fixture
def seed(store):
    """Usuario semilla con perfil completo y sin ubicación."""
    store.add_user("seed", gender="man", birthdate=date(1993, 5, 10))
    store._profiles["seed"] = profile_with_similarities("seed", {axis: 1.0 for axis in AXES})
    return "seed"


@pytest.fixture
def engine(store) -> MatchingEngine:
    return MatchingEngine(store, store, default_limit=10, max_limit=100, today=lambda: TODAY)


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()
