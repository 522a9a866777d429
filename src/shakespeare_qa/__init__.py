"""Shakespeare Q&A: retrieval-augmented answers over Shakespeare's works."""

__version__ = "0.1.0"
