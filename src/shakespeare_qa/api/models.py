"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional, List


class QuestionRequest(BaseModel):
    """Request model for a question."""
    question: Optional[str] = Field(None, description="Question about Shakespeare's works")


class AnswerResponse(BaseModel):
    """Response model for an answer."""
    answer: str
    source: str
    provider: str
    model: Optional[str] = None
    note: Optional[str] = None
    fallback_used: bool = False


class ErrorResponse(BaseModel):
    """Response model for a failed request."""
    error: str
    note: Optional[str] = None


class IngestResponse(BaseModel):
    """Response model for an ingestion run."""
    message: str
    source: Optional[str] = None
    characters: Optional[int] = None
    plays: Optional[int] = None
    chunks: Optional[int] = None
    works: Optional[List[str]] = None
    note: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    corpus_cached: bool
    llm_provider: str
