"""Main FastAPI application handler for Lambda deployment."""

import asyncio
import logging
import os
import time
from typing import Annotated

from fastapi import FastAPI, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from mangum import Mangum

from models.api import (
    ChatRequest,
    ChatResponse,
    FetchReportsRequest,
    ReportResponse,
    SynthesizedSummaries,
)
from services.aggregation_service import aggregate_reports, collect_texts
from services.caic_service import CAICService, is_valid_date_format
from services.progress_service import ProgressTracker
from services.summary_service import SummaryService
from utils.cache import CACHE_TTL_SECONDS, ResponseCache

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="CAIC Field Report Aggregator API",
    description="Daily avalanche field report statistics and AI summaries",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SUMMARY_CACHE_TTL_SECONDS = float(
    os.environ.get("SUMMARY_CACHE_TTL_SECONDS", str(CACHE_TTL_SECONDS))
)

# Longest chat message prefix written to the logs
LOG_MESSAGE_PREVIEW_CHARS = 100

# Summary categories with the progress percentage reported when each finishes
SUMMARY_STAGES = [
    ("Observation", 60),
    ("Snowpack", 75),
    ("Weather", 90),
]


@app.middleware("http")
async def log_requests(request, call_next):
    """Log all API requests with timing."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    # Log slow requests (>1s) at WARNING level for monitoring
    path = request.url.path
    if duration_ms > 1000:
        logger.warning(
            "[SLOW] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[CLIENT_ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized services
_caic_service = None
_summary_service = None
_progress_tracker = None


def reset_services():
    """Reset all lazy-initialized services. Useful for testing."""
    global _caic_service, _summary_service, _progress_tracker
    _caic_service = None
    _summary_service = None
    _progress_tracker = None


def get_caic_service() -> CAICService:
    """Get or create the CAIC report client."""
    global _caic_service
    if _caic_service is None:
        _caic_service = CAICService()
    return _caic_service


def get_summary_service() -> SummaryService:
    """Get or create the summary service and its response cache."""
    global _summary_service
    if _summary_service is None:
        _summary_service = SummaryService(
            cache=ResponseCache(ttl_seconds=SUMMARY_CACHE_TTL_SECONDS)
        )
    return _summary_service


def get_progress_tracker() -> ProgressTracker:
    """Get or create the progress listener registry."""
    global _progress_tracker
    if _progress_tracker is None:
        _progress_tracker = ProgressTracker()
    return _progress_tracker


def _preview(message: str) -> str:
    if len(message) > LOG_MESSAGE_PREVIEW_CHARS:
        return message[:LOG_MESSAGE_PREVIEW_CHARS] + "..."
    return message


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": app.version,
        "progress_clients": get_progress_tracker().client_count(),
    }


@app.get("/api/progress/{session_id}")
async def stream_progress(session_id: str):
    """Stream pipeline progress for a session as server-sent events."""
    return StreamingResponse(
        get_progress_tracker().stream(session_id),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@app.post("/api/reports", response_model=ReportResponse)
async def fetch_reports(
    request: FetchReportsRequest,
    x_session_id: Annotated[str | None, Header()] = None,
):
    """Fetch, aggregate and summarize all field reports for a date.

    Progress is pushed to the listener registered under ``X-Session-Id``.
    """
    date = request.date
    if not is_valid_date_format(date):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid date format. Use YYYY-MM-DD"},
        )

    tracker = get_progress_tracker()
    try:
        tracker.send_progress(
            x_session_id, "fetching", 10, f"Fetching reports for {date}..."
        )
        reports = await asyncio.to_thread(get_caic_service().fetch_reports, date)

        tracker.send_progress(
            x_session_id, "aggregating", 40, f"Aggregating {len(reports)} reports..."
        )
        aggregated_data = aggregate_reports(reports)
        texts = collect_texts(reports)

        summary_service = get_summary_service()

        async def summarize(category_texts: list[str], category: str, progress: int):
            result = await asyncio.to_thread(
                summary_service.synthesize_summary, category_texts, category
            )
            outcome = "loaded from cache" if result.cached else "generated"
            tracker.send_progress(
                x_session_id, "synthesizing", progress, f"{category} summary {outcome}"
            )
            return result.summary

        category_texts = [texts.observations, texts.snowpack, texts.weather]
        observation_summary, snowpack_summary, weather_summary = await asyncio.gather(
            *(
                summarize(category_text, category, progress)
                for category_text, (category, progress) in zip(
                    category_texts, SUMMARY_STAGES
                )
            )
        )

        response = ReportResponse(
            date=date,
            aggregated_data=aggregated_data,
            summaries=SynthesizedSummaries(
                observation_summary=observation_summary,
                snowpack_summary=snowpack_summary,
                weather_summary=weather_summary,
            ),
            raw_reports=reports if request.include_raw_reports else None,
        )
        tracker.send_progress(x_session_id, "complete", 100, "Report ready")
        return response

    except Exception as e:
        logger.error("Error fetching reports for %s: %s", date, e)
        tracker.send_progress(x_session_id, "error", 0, "Failed to fetch reports")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch and process reports"},
        )


@app.post("/api/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """Answer a question about a day's aggregated data."""
    logger.info("Chat request: %s", _preview(request.message))
    try:
        answer = await asyncio.to_thread(
            get_summary_service().chat_with_context,
            request.message,
            request.context,
            request.summaries,
        )
        return ChatResponse(response=answer)
    except Exception as e:
        logger.error("Chat error: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to process chat message"},
        )


# MARK: - Error Handlers


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400s."""
    details = ", ".join(error.get("msg", "") for error in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": details},
    )


# MARK: - Lambda Handler

# Create the Lambda handler
api_handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
