"""API routes for the Shakespeare Q&A service."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
import logging

from .. import __version__
from ..config import get_settings
from ..errors import ShakespeareQAError, GenerationFailure
from ..llm.factory import ProviderKind
from ..pipeline.answer import AnswerService
from ..pipeline.ingest import IngestService
from ..pipeline.state import AppState
from .models import (
    QuestionRequest,
    AnswerResponse,
    ErrorResponse,
    IngestResponse,
    HealthResponse
)

logger = logging.getLogger(__name__)

router = APIRouter()

NO_QUESTION = "No question provided."


def get_app_state(request: Request) -> AppState:
    """Get the process-wide state, creating it on first use."""
    state = getattr(request.app.state, "qa_state", None)
    if state is None:
        state = AppState(get_settings())
        request.app.state.qa_state = state
    return state


def get_answer_service(state: AppState = Depends(get_app_state)) -> AnswerService:
    """Get answer service instance."""
    return AnswerService(state)


def get_ingest_service(state: AppState = Depends(get_app_state)) -> IngestService:
    """Get ingest service instance."""
    return IngestService(state)


def error_response(status_code: int, error: str, note: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, note=note).model_dump(exclude_none=True)
    )


async def _answer(question_data: QuestionRequest, service: AnswerService, kind: ProviderKind, failure_message: str):
    question = (question_data.question or "").strip()
    if not question:
        return error_response(400, NO_QUESTION)

    try:
        answer = await service.ask(question, kind)
    except GenerationFailure as e:
        logger.error(f"{kind.value} answer failed: {e}")
        return error_response(500, failure_message, e.hint)
    except ShakespeareQAError as e:
        logger.error(f"Failed to load Shakespeare data: {e}")
        return error_response(500, "Failed to load Shakespeare data. Please try again.", e.hint)
    except Exception as e:
        logger.error(f"{kind.value} answer failed: {e}", exc_info=True)
        return error_response(500, failure_message)

    return AnswerResponse(**answer.to_dict())


@router.get("/health", response_model=HealthResponse)
async def health_check(state: AppState = Depends(get_app_state)):
    """Health check endpoint."""
    corpus_cached = state.cached_corpus() is not None
    return HealthResponse(
        status="healthy" if corpus_cached else "degraded",
        version=__version__,
        corpus_cached=corpus_cached,
        llm_provider=state.settings.llm_provider
    )


@router.post("/ask", response_model=AnswerResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def ask(question_data: QuestionRequest, service: AnswerService = Depends(get_answer_service)):
    """Answer with OpenAI over vector-store context."""
    return await _answer(
        question_data,
        service,
        ProviderKind.OPENAI,
        "Unable to process your question. Please try again or use a different AI provider."
    )


@router.post("/ask-gemini", response_model=AnswerResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def ask_gemini(question_data: QuestionRequest, service: AnswerService = Depends(get_answer_service)):
    """Answer with Gemini over keyword-ranked passages."""
    return await _answer(
        question_data,
        service,
        ProviderKind.GEMINI,
        "Failed to process question with Gemini API."
    )


@router.post("/demo", response_model=AnswerResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def demo(question_data: QuestionRequest, service: AnswerService = Depends(get_answer_service)):
    """Answer offline from the cached corpus or canned knowledge."""
    return await _answer(
        question_data,
        service,
        ProviderKind.DEMO,
        "Failed to process question."
    )


@router.post("/ingest-mit", response_model=IngestResponse, responses={500: {"model": ErrorResponse}})
async def ingest_mit(service: IngestService = Depends(get_ingest_service)):
    """Fetch, clean and cache the complete works."""
    try:
        result = await service.ingest_complete_works()
    except ShakespeareQAError as e:
        logger.error(f"MIT ingestion error: {e}")
        return error_response(500, str(e), e.hint)
    return IngestResponse(**result)


@router.post("/ingest", response_model=IngestResponse, responses={500: {"model": ErrorResponse}})
async def ingest(service: IngestService = Depends(get_ingest_service)):
    """Fetch every play and rebuild the vector index."""
    try:
        result = await service.ingest_plays()
    except ShakespeareQAError as e:
        logger.error(f"Ingestion error: {e}")
        return error_response(500, str(e), e.hint)
    except Exception as e:
        logger.error(f"Ingestion error: {e}", exc_info=True)
        return error_response(500, str(e))
    return IngestResponse(**result)


@router.post("/ingest-gemini", response_model=IngestResponse, responses={500: {"model": ErrorResponse}})
async def ingest_gemini(service: IngestService = Depends(get_ingest_service)):
    """Fetch the core plays for keyword-only answering."""
    try:
        result = await service.ingest_core_plays()
    except ShakespeareQAError as e:
        logger.error(f"Gemini ingestion error: {e}")
        return error_response(500, str(e), e.hint)
    return IngestResponse(**result)
