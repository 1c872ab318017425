from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import (
    Depends,
    FastAPI,
    File,
    HTTPException,
    Query,
    Request,
    UploadFile,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from astrobio_navigator.ai.gemini_client import GeminiClient, GeminiClientConfig
from astrobio_navigator.api.models import (
    AnalysisResponse,
    CatalogReloadResult,
    ChatRequest,
    ChatResponse,
    MindmapResponse,
    NarrationResponse,
    PaperDetail,
    PaperSummary,
    PaperUrlRequest,
    QuizResponse,
    SummaryRequest,
    SummaryResponse,
)
from astrobio_navigator.catalog.loader import load_catalog
from astrobio_navigator.catalog.snapshot import CatalogSnapshot
from astrobio_navigator.config.settings import get_settings
from astrobio_navigator.crossref.documents import validate_upload
from astrobio_navigator.crossref.pipeline import analyze_document
from astrobio_navigator.errors import (
    InputValidationError,
    ModelCallError,
    ParseError,
)
from astrobio_navigator.features.chatbot import answer_question
from astrobio_navigator.features.mindmap import generate_mindmap
from astrobio_navigator.features.narration import generate_narration_script
from astrobio_navigator.features.quiz import generate_quiz
from astrobio_navigator.features.summary import UserProfile, generate_summary
from astrobio_navigator.models.analysis import UploadedDocument
from astrobio_navigator.web.security import api_key_auth, rate_limiter

logger = logging.getLogger("astrobio_navigator.web")
logging.basicConfig(level=logging.INFO)


# -------------------------------------------------------------------
# Lifespan: load the catalog snapshot once at startup
# -------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup/shutdown handler:
    - Load the paper catalog snapshot (falls back to built-in entries)
    - Leave model clients to be created on first use
    """
    app.state.catalog = await run_in_threadpool(load_catalog)
    logger.info("Catalog ready: %d papers from %s", len(app.state.catalog), app.state.catalog.source)

    yield

    # No shutdown actions yet


app = FastAPI(
    title="AstroBio Navigator API",
    description="Browse space-biology papers and run AI analyses against them.",
    version="0.1.0",
    lifespan=lifespan,
)

# -------------------------------------------------------------------
# CORS – allow everything for now (tighten later)
# -------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log method, path, and response status. Simple but effective.
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")
    start = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    logger.info(
        f"Completed {request.method} {request.url.path} "
        f"with status {response.status_code} in {duration_ms:.2f}ms"
    )

    return response


# -------------------------------------------------------------------
# Error mapping
# -------------------------------------------------------------------


@app.exception_handler(InputValidationError)
async def _input_validation_error(request: Request, exc: InputValidationError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(ModelCallError)
async def _model_call_error(request: Request, exc: ModelCallError):
    logger.error("Model call failed on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(ParseError)
async def _parse_error(request: Request, exc: ParseError):
    logger.error("Unusable model response on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------


async def _get_catalog(app_obj: FastAPI) -> CatalogSnapshot:
    """
    Fetch the catalog snapshot from app.state, loading it in a worker thread
    if the lifespan has not run (e.g. a bare TestClient).
    """
    catalog = getattr(app_obj.state, "catalog", None)
    if catalog is None:
        catalog = await run_in_threadpool(load_catalog)
        app_obj.state.catalog = catalog
    return catalog


def _get_analysis_client(app_obj: FastAPI) -> GeminiClient:
    client = getattr(app_obj.state, "analysis_client", None)
    if client is None:
        client = GeminiClient(GeminiClientConfig.from_settings())
        app_obj.state.analysis_client = client
    return client


def _get_feature_client(app_obj: FastAPI) -> GeminiClient:
    client = getattr(app_obj.state, "feature_client", None)
    if client is None:
        settings = get_settings()
        client = GeminiClient(
            GeminiClientConfig.from_settings(settings, model=settings.GEMINI_FEATURE_MODEL)
        )
        app_obj.state.feature_client = client
    return client


# -------------------------------------------------------------------
# Routes: catalog
# -------------------------------------------------------------------


@app.get("/health", summary="Health check")
async def health(request: Request) -> dict:
    catalog = getattr(request.app.state, "catalog", None)
    return {"status": "ok", "catalog_size": len(catalog) if catalog is not None else 0}


@app.get(
    "/papers",
    response_model=List[PaperSummary],
    summary="List or search catalog papers",
)
async def list_papers(
    request: Request,
    q: Optional[str] = Query(None, description="Case-insensitive search text."),
    limit: int = Query(100, ge=1, le=1000),
) -> List[PaperSummary]:
    catalog = await _get_catalog(request.app)
    entries = catalog.search(q) if q else list(catalog)
    return [PaperSummary.from_entry(e) for e in entries[:limit]]


@app.get(
    "/papers/{paper_id}",
    response_model=PaperDetail,
    summary="Get a single catalog paper",
)
async def get_paper(paper_id: str, request: Request) -> PaperDetail:
    entry = (await _get_catalog(request.app)).get(paper_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Paper {paper_id} not found")
    return PaperDetail.from_entry(entry)


@app.post(
    "/catalog/reload",
    response_model=CatalogReloadResult,
    summary="Reload the paper catalog snapshot",
    dependencies=[Depends(api_key_auth)],
)
async def reload_catalog(request: Request) -> CatalogReloadResult:
    catalog = await run_in_threadpool(load_catalog)
    request.app.state.catalog = catalog
    return CatalogReloadResult(source=catalog.source, paper_count=len(catalog))


# -------------------------------------------------------------------
# Routes: AI features
# -------------------------------------------------------------------


@app.post(
    "/analyze/pdf",
    response_model=AnalysisResponse,
    summary="Upload a PDF and find related catalog papers, citations and cross-references",
    dependencies=[Depends(api_key_auth), Depends(rate_limiter)],
)
async def analyze_pdf(
    request: Request,
    file: UploadFile = File(..., description="PDF file to analyze"),
) -> AnalysisResponse:
    settings = get_settings()
    document = UploadedDocument(
        content=await file.read(),
        media_type=file.content_type or "application/octet-stream",
        filename=file.filename,
    )
    validate_upload(document, max_bytes=settings.MAX_UPLOAD_BYTES)

    catalog = await _get_catalog(request.app)
    result = await run_in_threadpool(
        analyze_document,
        document,
        catalog,
        client=_get_analysis_client(request.app),
        settings=settings,
    )
    return AnalysisResponse.from_result(result)


@app.post(
    "/papers/summary",
    response_model=SummaryResponse,
    dependencies=[Depends(api_key_auth), Depends(rate_limiter)],
)
async def paper_summary(payload: SummaryRequest, request: Request) -> SummaryResponse:
    profile = None
    if payload.user_profile is not None:
        profile = UserProfile(
            age=payload.user_profile.age,
            experience_level=payload.user_profile.experience_level,
            learning_style=payload.user_profile.learning_style,
        )

    summary = await run_in_threadpool(
        generate_summary,
        _get_feature_client(request.app),
        payload.paper_url,
        payload.complexity_level,
        profile,
    )
    return SummaryResponse(summary=summary)


@app.post(
    "/papers/quiz",
    response_model=QuizResponse,
    dependencies=[Depends(api_key_auth), Depends(rate_limiter)],
)
async def paper_quiz(payload: PaperUrlRequest, request: Request) -> QuizResponse:
    quiz = await run_in_threadpool(generate_quiz, _get_feature_client(request.app), payload.paper_url)
    return QuizResponse(quiz=quiz.quiz)


@app.post(
    "/papers/mindmap",
    response_model=MindmapResponse,
    dependencies=[Depends(api_key_auth), Depends(rate_limiter)],
)
async def paper_mindmap(payload: PaperUrlRequest, request: Request) -> MindmapResponse:
    mindmap = await run_in_threadpool(
        generate_mindmap, _get_feature_client(request.app), payload.paper_url
    )
    return MindmapResponse(nodes=mindmap.nodes, edges=mindmap.edges)


@app.post(
    "/papers/chat",
    response_model=ChatResponse,
    dependencies=[Depends(api_key_auth), Depends(rate_limiter)],
)
async def paper_chat(payload: ChatRequest, request: Request) -> ChatResponse:
    answer = await run_in_threadpool(
        answer_question,
        _get_feature_client(request.app),
        payload.paper_url,
        payload.question,
    )
    return ChatResponse(answer=answer)


@app.post(
    "/papers/narration",
    response_model=NarrationResponse,
    dependencies=[Depends(api_key_auth), Depends(rate_limiter)],
)
async def paper_narration(payload: PaperUrlRequest, request: Request) -> NarrationResponse:
    script = await run_in_threadpool(
        generate_narration_script, _get_feature_client(request.app), payload.paper_url
    )
    return NarrationResponse(narration_script=script)
