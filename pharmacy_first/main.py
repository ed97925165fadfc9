"""
Pharmacy First Pathways - FastAPI Application

API endpoints for:
- Pathway catalogue and documents
- Answer-driven pathway traversal
- NEWS2 early-warning scoring
- Relay to the remote otoscope image classifier
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pharmacy_first.config import settings
from pharmacy_first.core.news2 import calculate_news2
from pharmacy_first.core.pathways import PathwayRegistry, TraversalCursor
from pharmacy_first.models import (
    HealthResponse,
    InferRequest,
    NEWS2Request,
    NEWS2Response,
    TraversalRequest,
    TraversalResponse,
)
from pharmacy_first.services import InferenceProxyService
from pharmacy_first.utils import (
    InferenceProxyError,
    InvalidTraversalError,
    MalformedPathwayError,
    PathwayNotFoundError,
    get_logger,
    pathway_context,
    setup_logging,
)

logger = get_logger(__name__)


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file)
    app.state.registry = _registry
    app.state.inference_proxy = _inference_proxy
    logger.info(
        f"{settings.app_name} v{settings.app_version} ready: "
        f"{len(_registry.definitions())} pathway(s) registered"
    )
    yield
    logger.info(f"{settings.app_name} shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Guided clinical pathways and NEWS2 scoring for community pharmacy consultations",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 without echoing rejected input; NaN and Infinity are not valid JSON."""
    errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# ---- Services ----
_registry = PathwayRegistry(settings.pathway_data_dir)
_inference_proxy = InferenceProxyService()
START_TIME = datetime.now()


# ---- Utility Functions ----

async def _load_document(slug: str):
    """Registry lookup with registry errors mapped to HTTP errors."""
    try:
        return await _registry.get_document(slug)
    except PathwayNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.to_dict())
    except MalformedPathwayError as exc:
        logger.error(f"Pathway '{slug}' is malformed at node {exc.node_id}: {exc.message}")
        raise HTTPException(status_code=422, detail=exc.to_dict())


async def _traverse(slug: str, request: TraversalRequest) -> TraversalResponse:
    document = await _load_document(slug)
    history = request.history.to_history() if request.history is not None else None
    cursor = TraversalCursor(document, history=history)

    for step, answer in enumerate(request.answers):
        try:
            cursor.answer(answer)
        except InvalidTraversalError as exc:
            detail = exc.to_dict()
            detail["details"]["step"] = step
            detail["details"]["path"] = list(cursor.path)
            raise HTTPException(status_code=400, detail=detail)

    return TraversalResponse(**cursor.snapshot())


def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.get("/api/v1/pathways", tags=["Pathways"])
async def list_pathways() -> Dict[str, Any]:
    """List every registered pathway."""
    return {"pathways": [d.to_dict() for d in _registry.definitions()]}


@app.get("/api/v1/pathways/{slug}", tags=["Pathways"])
async def get_pathway(slug: str) -> Dict[str, Any]:
    """Catalogue entry plus the loaded document (without the node arena)."""
    with pathway_context(slug):
        document = await _load_document(slug)
        return {
            "definition": _registry.definition(slug).to_dict(),
            "pathway": document.summary(),
        }


@app.post("/api/v1/pathways/{slug}/traverse", response_model=TraversalResponse, tags=["Pathways"])
async def traverse_pathway(slug: str, request: TraversalRequest):
    """
    Replay the clinician's answers from the root and return where they lead.

    A rejected answer returns 400 along with the step index it failed at;
    the earlier answers are not lost, the client simply re-prompts.
    """
    with pathway_context(slug):
        return await _traverse(slug, request)


@app.post("/api/v1/news2", response_model=NEWS2Response, tags=["NEWS2"])
async def score_news2(request: NEWS2Request):
    """Calculate the NEWS2 score for one set of observations."""
    result = calculate_news2(request.to_parameters())
    return NEWS2Response(**result.to_dict())


@app.get("/api/v1/ui/motion", tags=["UI"])
async def motion_timings() -> Dict[str, float]:
    """Animation timings for the consultation UI."""
    return settings.motion_timings()


@app.post("/api/infer", tags=["Inference"])
async def infer(request: InferRequest, stage: Optional[str] = Query(default="binary")):
    """Relay an otoscope image to the remote classifier."""
    try:
        status_code, data = await _inference_proxy.relay(stage, request.model_dump())
    except InferenceProxyError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )
    return JSONResponse(status_code=status_code, content=data)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pharmacy_first.main:app", host="0.0.0.0", port=8000, reload=False)
