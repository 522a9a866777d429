"""Exception hierarchy for corpus loading and answer generation."""


class ShakespeareQAError(Exception):
    """Base exception for the service.

    Every error carries a ``hint`` telling the caller what would resolve it.
    """

    default_hint = ""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message)
        self.hint = hint if hint is not None else self.default_hint


class DataUnavailable(ShakespeareQAError):
    """No corpus could be obtained from the cache or a remote source."""

    default_hint = "Run the MIT ingestion (POST /api/ingest-mit) or check your internet connection."


class NetworkError(ShakespeareQAError):
    """Remote fetch failed."""

    default_hint = "Check your internet connection and the configured corpus URL."


class CorpusNotFound(ShakespeareQAError):
    """Requested text is not present in the local data directory."""

    default_hint = "Run the MIT ingestion process to populate the data directory."


class CorpusIOError(ShakespeareQAError):
    """Local persistence failed."""

    default_hint = "Check that the data directory exists and is writable."


class GenerationFailure(ShakespeareQAError):
    """Text generation failed (quota, auth, network)."""

    default_hint = "Please try again or use a different AI provider."


class VectorStoreError(ShakespeareQAError):
    """Vector store query or write failed."""

    default_hint = "Check that ChromaDB is running, or re-run the ingestion (POST /api/ingest)."
