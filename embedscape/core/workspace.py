"""
Workspace: central orchestrator for Embedscape.
Fetches embeddings, reduces them, and swaps the visible batch.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from embedscape.core.display import DisplayController
from embedscape.core.errors import EmptyBatch, RequestInFlight
from embedscape.core.point_store import PointBatch, PointMetadata, PointStore
from embedscape.core.projector import PCAProjector
from embedscape.embedders.base import BaseEmbedder, get_embedder
from embedscape.loaders.points_file import PointsFileLoader
from embedscape.loaders.texts_csv import TextsCsvLoader
import config

logger = logging.getLogger(__name__)

OwnerSpec = Union[None, str, Sequence[Optional[str]]]
VectorPair = Union[Mapping[str, Any], tuple[str, Sequence[float]]]


class Workspace:
    """
    Central orchestrator for one exploration session.

    Responsibilities:
    - Fetch embeddings for texts through the embedder
    - Reduce them with a PCA projector
    - Replace the visible batch in the point store
    - Allow at most one request in flight
    - Keep the previous batch visible when a request fails
    """

    def __init__(
        self,
        embedder: Optional[BaseEmbedder] = None,
        store: Optional[PointStore] = None,
        controller: Optional[DisplayController] = None,
        n_components: int = config.N_COMPONENTS_2D,
        executor: Optional[ThreadPoolExecutor] = None
    ):
        """
        Initialize the Workspace.

        Args:
            embedder: Embedding backend (defaults to the configured one, created on first use)
            store: Point store (a new one by default)
            controller: Display controller over the store
            n_components: Default output dimension, 2 or 3
            executor: Worker pool for submit_texts. A shared pool is left running
                by shutdown(); without one the workspace creates and owns its own.
        """
        self._embedder = embedder
        self.store = store or PointStore()
        self.controller = controller or DisplayController(self.store)
        self.n_components = n_components

        self.projector: Optional[PCAProjector] = None
        self.last_error: Optional[str] = None

        self._gate = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = executor
        self._owns_executor = executor is None

    @property
    def embedder(self) -> BaseEmbedder:
        if self._embedder is None:
            self._embedder = get_embedder(config.DEFAULT_EMBEDDER)
        return self._embedder

    @property
    def is_busy(self) -> bool:
        """True while a request is in flight."""
        return self._gate.locked()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def visualize_texts(
        self,
        texts: Iterable[str],
        owners: OwnerSpec = None,
        n_components: Optional[int] = None
    ) -> PointBatch:
        """
        Embed texts, reduce them, and make the result visible.

        Args:
            texts: Texts to embed, in display order
            owners: One owner id for all texts, or one per text
            n_components: Output dimension (defaults to the workspace setting)

        Raises:
            EmptyBatch: If no texts are given (before any fetch)
            RequestInFlight: If another request is running
        """
        texts = list(texts)
        metadata = self._build_metadata(texts, owners)
        self._acquire()
        return self._run_gated(self._visualize_texts, texts, metadata, n_components)

    def visualize_vectors(
        self,
        pairs: Iterable[VectorPair],
        n_components: Optional[int] = None
    ) -> PointBatch:
        """
        Reduce caller-supplied {text, vector} pairs and make the result visible.

        Raises:
            EmptyBatch: If no pairs are given
            RequestInFlight: If another request is running
        """
        vectors, metadata = self._split_pairs(pairs)
        self._acquire()
        return self._run_gated(
            self._reduce_and_replace, vectors, metadata, n_components, config.SOURCE_INPUTS
        )

    def visualize_texts_csv(
        self,
        path: Optional[Path] = None,
        n_components: Optional[int] = None
    ) -> PointBatch:
        """Embed every row of a texts CSV and make the result visible."""
        df = TextsCsvLoader(csv_path=path).load()
        texts = df["text"].tolist()
        metadata = self._build_metadata(texts, df["owner_id"].tolist())
        self._acquire()
        return self._run_gated(
            self._visualize_texts, texts, metadata, n_components, config.SOURCE_TEXTS_CSV
        )

    def load_points(self, path: Optional[Path] = None) -> PointBatch:
        """
        Load an already reduced point file and make it visible.

        No reduction is applied.
        """
        self._acquire()
        return self._run_gated(self._load_points, path)

    def submit_texts(
        self,
        texts: Iterable[str],
        owners: OwnerSpec = None,
        n_components: Optional[int] = None
    ) -> Future:
        """
        Run visualize_texts on a background worker.

        The gate is taken before returning, so a second submit raises
        RequestInFlight until this one finishes.

        Returns:
            Future resolving to the new PointBatch
        """
        texts = list(texts)
        metadata = self._build_metadata(texts, owners)
        self._acquire()
        try:
            return self._get_executor().submit(
                self._run_gated, self._visualize_texts, texts, metadata, n_components
            )
        except Exception:
            self._gate.release()
            raise

    def shutdown(self) -> None:
        """Stop the background worker this workspace created, waiting for a running request."""
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=True)
            self._executor = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _acquire(self) -> None:
        if not self._gate.acquire(blocking=False):
            raise RequestInFlight("A reduction request is already running")

    def _run_gated(self, func: Callable[..., PointBatch], *args) -> PointBatch:
        """Run func with the gate held; release it and record errors afterwards."""
        try:
            batch = func(*args)
            self.last_error = None
            return batch
        except Exception as e:
            logger.exception("Request failed, keeping the previous batch")
            self.last_error = str(e)
            raise
        finally:
            self._gate.release()

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="embedscape")
        return self._executor

    def _visualize_texts(
        self,
        texts: list[str],
        metadata: list[PointMetadata],
        n_components: Optional[int],
        source: str = config.SOURCE_INPUTS
    ) -> PointBatch:
        logger.info(f"Fetching embeddings for {len(texts)} texts with {self.embedder.name}...")
        vectors = self.embedder.embed(texts)
        return self._reduce_and_replace(vectors, metadata, n_components, source)

    def _reduce_and_replace(
        self,
        vectors,
        metadata: list[PointMetadata],
        n_components: Optional[int],
        source: str
    ) -> PointBatch:
        projector = PCAProjector(n_components=n_components or self.n_components)
        coords = projector.fit(vectors)

        batch = self.store.load(coords, metadata, source=source)
        self.store.replace(batch)
        self.projector = projector
        return batch

    def _load_points(self, path: Optional[Path]) -> PointBatch:
        loader = PointsFileLoader(path=path)
        df = loader.load()
        logger.info(f"Loaded {len(df)} points from {loader.path}")

        metadata = [
            PointMetadata(text=text, owner_id=owner)
            for text, owner in zip(df["text"], df["owner_id"])
        ]
        batch = self.store.load(df["embedding"].tolist(), metadata, source=config.SOURCE_POINTS_FILE)
        self.store.replace(batch)
        self.projector = None
        return batch

    @staticmethod
    def _build_metadata(texts: list[str], owners: OwnerSpec) -> list[PointMetadata]:
        if not texts:
            raise EmptyBatch("No texts to visualize")

        if owners is None or isinstance(owners, str):
            owner_list = [owners] * len(texts)
        else:
            owner_list = list(owners)
            if len(owner_list) != len(texts):
                raise ValueError(f"Got {len(texts)} texts but {len(owner_list)} owners")

        return [PointMetadata(text=t, owner_id=o) for t, o in zip(texts, owner_list)]

    @staticmethod
    def _split_pairs(pairs: Iterable[VectorPair]) -> tuple[list[Sequence[float]], list[PointMetadata]]:
        vectors, metadata = [], []
        for pair in pairs:
            if isinstance(pair, Mapping):
                vectors.append(pair["vector"])
                metadata.append(PointMetadata.coerce(pair))
            else:
                text, vector = pair
                vectors.append(vector)
                metadata.append(PointMetadata(text=text))

        if not vectors:
            raise EmptyBatch("No vectors to visualize")
        return vectors, metadata
