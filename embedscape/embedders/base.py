"""
Base class for embedding backends.
An embedder turns texts into raw vectors; Embedscape never computes them itself.
"""

from abc import ABC, abstractmethod

import numpy as np


class BaseEmbedder(ABC):
    """
    Abstract base class for text embedding backends.

    All embedders must:
    - Return exactly one vector per input text, in input order
    - Provide a unique name for display and logging
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> np.ndarray:
        """
        Embed a list of texts into vectors.

        Args:
            texts: List of text strings to embed

        Returns:
            np.ndarray of shape (len(texts), dimension)
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """String identifier for the embedder."""

    def embed_single(self, text: str) -> np.ndarray:
        """Embed one text, returning shape (dimension,)."""
        return self.embed([text])[0]


# Registry for available embedders
_EMBEDDER_REGISTRY: dict[str, type[BaseEmbedder]] = {}


def register_embedder(name: str):
    """
    Decorator to register an embedder class.

    Usage:
        @register_embedder("openai")
        class OpenAIEmbedder(BaseEmbedder):
            ...
    """
    def decorator(cls: type[BaseEmbedder]):
        _EMBEDDER_REGISTRY[name] = cls
        return cls
    return decorator


def get_embedder(name: str, **kwargs) -> BaseEmbedder:
    """
    Get an embedder instance by name.

    Raises:
        ValueError: If embedder name not found
    """
    if name not in _EMBEDDER_REGISTRY:
        available = list(_EMBEDDER_REGISTRY.keys())
        raise ValueError(f"Unknown embedder '{name}'. Available: {available}")

    return _EMBEDDER_REGISTRY[name](**kwargs)


def list_embedders() -> list[str]:
    """Return list of registered embedder names."""
    return list(_EMBEDDER_REGISTRY.keys())
