import logging
import random

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nofake.config import Settings, get_settings
from nofake.errors import INTERNAL_ERROR, error_for_field, to_json_response
from nofake.logging_setup import configure_logging
from nofake.models import AnalysisResult, CitationsRequest, CitationsResult, VerifyRequest
from nofake.services.citations import generate_citations
from nofake.services.credibility import analyze_content
from nofake.services.oracle import GeminiOracle, OracleConfig, TextOracle

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=get_settings().app_name,
    description="News credibility checker with AI-suggested academic citations.",
    version="1.0.0",
)
BUILD_ID = "2026-10-19-api-v1"

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

NO_CACHE_PATHS = ("/verify", "/citations", "/api/", "/__build")


@app.middleware("http")
async def no_cache_middleware(request: Request, call_next):
    response = await call_next(request)
    if request.url.path.startswith(NO_CACHE_PATHS):
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field = None
    if errors:
        loc = [part for part in errors[0].get("loc", ()) if part != "body"]
        field = str(loc[0]) if loc else None
    spec = error_for_field(field)
    logger.info(f"Rejected {request.url.path} request: {spec.code}")
    return to_json_response(spec)


def get_oracle(settings: Settings = Depends(get_settings)) -> TextOracle:
    return GeminiOracle(OracleConfig.from_settings(settings))


def get_rng() -> random.Random:
    return random.Random()


@app.post("/verify", response_model=AnalysisResult)
@app.post("/api/verify", response_model=AnalysisResult)
def verify(req: VerifyRequest, oracle: TextOracle = Depends(get_oracle)):
    try:
        return analyze_content(req.content, oracle, provided_url=req.provided_url)
    except Exception:
        logger.exception("Credibility verification failed")
        return to_json_response(INTERNAL_ERROR)


@app.post("/citations", response_model=CitationsResult)
@app.post("/api/citations", response_model=CitationsResult)
def citations(
    req: CitationsRequest,
    oracle: TextOracle = Depends(get_oracle),
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
):
    try:
        return generate_citations(
            req.topic,
            req.format,
            req.analyzed_text,
            oracle,
            settings,
            rng=rng,
        )
    except Exception:
        logger.exception("Citation generation failed")
        return to_json_response(INTERNAL_ERROR)


@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "oracle": "configured" if settings.oracle_configured else "fallback"}


@app.get("/__build")
def build_info() -> dict[str, str]:
    return {"build_id": BUILD_ID}
