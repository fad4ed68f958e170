"""Domain error types."""


class GenerationError(Exception):
    """Raised when the generation service rejects or breaks off a request."""


class UnknownModelError(Exception):
    """Raised when a model name is not in the catalog."""
