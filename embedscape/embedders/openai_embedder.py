"""
OpenAI-compatible embedding backend.
Works against api.openai.com or any server exposing the same embeddings API.
"""

import logging
import os
import time
from typing import Callable, Optional

import numpy as np
import openai
from openai import OpenAI

from .base import BaseEmbedder, register_embedder
import config

logger = logging.getLogger(__name__)


@register_embedder("openai")
class OpenAIEmbedder(BaseEmbedder):
    """
    Embedding backend for the OpenAI embeddings API.

    Features:
    - Configurable base URL for local OpenAI-compatible servers
    - Token-aware batching
    - Exponential back-off on rate limits
    - Output order always matches input order
    """

    # Max tokens per embedding request, with some buffer below the API limit
    MAX_TOKENS_PER_REQUEST = 250000
    CHARS_PER_TOKEN_ESTIMATE = 3.5

    def __init__(
        self,
        model: str = config.OPENAI_MODEL,
        batch_size: int = config.OPENAI_BATCH_SIZE,
        api_key: Optional[str] = None,
        base_url: Optional[str] = config.OPENAI_BASE_URL,
        client: Optional[OpenAI] = None
    ):
        """
        Initialize the OpenAI embedder.

        Args:
            model: Embedding model name
            batch_size: Max texts per API call
            api_key: Optional API key (defaults to OPENAI_API_KEY env var)
            base_url: Optional API base URL (defaults to OPENAI_BASE_URL env var)
            client: Pre-built client, mainly for tests
        """
        self.model = model
        self.batch_size = batch_size
        self.base_url = base_url

        if client is not None:
            self.client = client
            return

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            if base_url is None:
                raise ValueError(
                    "OpenAI API key not found. "
                    "Set OPENAI_API_KEY in .env file or pass api_key parameter."
                )
            # Local OpenAI-compatible servers usually ignore the key
            api_key = "not-needed"

        self.client = OpenAI(api_key=api_key, base_url=base_url)

    @property
    def name(self) -> str:
        return f"openai_{self.model}"

    def embed(
        self,
        texts: list[str],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> np.ndarray:
        """
        Embed texts with dynamic batching.

        Args:
            texts: List of text strings to embed
            progress_callback: Optional callback(batch_num, total_batches) for UI updates

        Returns:
            np.ndarray of shape (len(texts), dimension), float64
        """
        if not texts:
            return np.zeros((0, 0))

        cleaned_texts = [self._clean_text(t) for t in texts]
        batches = self._create_token_aware_batches(cleaned_texts)
        n_batches = len(batches)

        all_embeddings = []
        for batch_num, batch in enumerate(batches, 1):
            if n_batches > 1:
                logger.info(f"Embedding batch {batch_num}/{n_batches} ({len(batch)} texts)...")

            if progress_callback:
                progress_callback(batch_num, n_batches)

            all_embeddings.extend(self._embed_batch_with_retry(batch))

        if len(all_embeddings) != len(texts):
            raise RuntimeError(
                f"Embedding service returned {len(all_embeddings)} vectors for {len(texts)} texts"
            )

        return np.array(all_embeddings, dtype=np.float64)

    def _create_token_aware_batches(self, texts: list[str]) -> list[list[str]]:
        """Split texts into batches that respect both count and token limits."""
        batches = []
        current_batch = []
        current_tokens = 0.0

        for text in texts:
            estimated_tokens = len(text) / self.CHARS_PER_TOKEN_ESTIMATE

            would_exceed_tokens = (current_tokens + estimated_tokens) > self.MAX_TOKENS_PER_REQUEST
            would_exceed_count = len(current_batch) >= self.batch_size

            if current_batch and (would_exceed_tokens or would_exceed_count):
                batches.append(current_batch)
                current_batch = []
                current_tokens = 0.0

            current_batch.append(text)
            current_tokens += estimated_tokens

        if current_batch:
            batches.append(current_batch)

        return batches

    def _embed_batch_with_retry(
        self,
        texts: list[str],
        max_retries: int = 5,
        base_delay: float = 2.0
    ) -> list[list[float]]:
        """
        Embed a batch, retrying on rate limits.

        Args:
            texts: Batch of texts to embed
            max_retries: Maximum attempts
            base_delay: Base delay in seconds (doubled each retry)

        Returns:
            List of embedding vectors in input order
        """
        for attempt in range(max_retries):
            try:
                response = self.client.embeddings.create(model=self.model, input=texts)
                # Sort by index to ensure order matches input
                sorted_data = sorted(response.data, key=lambda x: x.index)
                return [item.embedding for item in sorted_data]

            except openai.RateLimitError:
                if attempt < max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(f"Rate limited. Waiting {delay}s before retry...")
                    time.sleep(delay)
                    continue
                raise

        raise RuntimeError(f"Failed to embed batch after {max_retries} attempts")

    def _clean_text(self, text: str, max_chars: int = 20000) -> str:
        """Strip and truncate text; empty strings become a single space."""
        if not text:
            return " "  # Empty strings cause API errors

        text = str(text).strip()
        if len(text) > max_chars:
            text = text[:max_chars]

        return text or " "
