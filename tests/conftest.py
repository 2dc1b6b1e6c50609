"""
Pytest configuration and shared fixtures.
"""
import numpy as np
import pytest

from embedscape.core.display import DisplayController
from embedscape.core.point_store import PointStore
from embedscape.core.projector import reduce
from embedscape.embedders.base import BaseEmbedder


class FakeEmbedder(BaseEmbedder):
    """Deterministic embedder: random vectors seeded by each text."""

    def __init__(self, dimension: int = 16):
        self.dimension = dimension
        self.calls = []

    @property
    def name(self) -> str:
        return "fake"

    def embed(self, texts):
        self.calls.append(list(texts))
        vectors = []
        for text in texts:
            rng = np.random.default_rng(sum(ord(c) for c in text) + len(text))
            vectors.append(rng.normal(size=self.dimension))
        return np.array(vectors)


@pytest.fixture
def orthogonal_vectors():
    return [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0]]


@pytest.fixture
def store():
    return PointStore()


@pytest.fixture
def controller(store):
    return DisplayController(store)


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def abc_batch(store, orthogonal_vectors):
    """The three orthogonal vectors reduced to 2D and made visible."""
    coords = reduce(orthogonal_vectors, n_components=2)
    return store.load_and_replace(coords, ["a", "b", "c"])
