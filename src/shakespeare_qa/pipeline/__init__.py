"""Request pipelines and shared state."""

from .state import AppState, LazyValue
from .answer import Answer, AnswerService
from .ingest import IngestService

__all__ = ['AppState', 'LazyValue', 'Answer', 'AnswerService', 'IngestService']
