"""Error types raised by the reduction and point-store pipeline."""


class EmbedscapeError(Exception):
    """Base class for all Embedscape errors."""


class InvalidDimension(EmbedscapeError, ValueError):
    """Vector lengths disagree, or the target dimension exceeds the input one."""


class EmptyBatch(EmbedscapeError, ValueError):
    """A batch with zero vectors was submitted."""


class BatchMismatch(EmbedscapeError, ValueError):
    """Reduced points and metadata have different lengths."""


class RequestInFlight(EmbedscapeError, RuntimeError):
    """A reduction request was submitted while another one is still running."""
