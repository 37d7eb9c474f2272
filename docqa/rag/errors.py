from __future__ import annotations

"""Error taxonomy shared by the store, the LLM clients and the answer service."""


class InvalidInput(ValueError):
    """Raised when a caller omits a question, name or content."""
    pass


class StoreUnavailable(RuntimeError):
    """Raised when the document store cannot be reached or queried."""
    pass


class UpstreamFailure(RuntimeError):
    """Raised when the LLM is unreachable, times out or returns garbage."""
    pass


class ConfigurationError(ValueError):
    """Raised at startup when settings name an unknown policy or lack provider credentials."""
    pass
