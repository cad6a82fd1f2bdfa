import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from webspecs.config import APP_VERSION, get_settings
from webspecs.limiter import limiter
from webspecs.routers.accessibility import router as accessibility_router
from webspecs.routers.content import router as content_router
from webspecs.routers.structure import router as structure_router

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": get_settings().log_level.upper(), "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="webspecs – Web Page Structure Analysis API",
    description=(
        "Analyzes how a page is built and how that differs before and after "
        "JavaScript runs: landmarks, headings, links, hidden content, reader-view "
        "extraction and the accessibility tree."
    ),
    version=APP_VERSION,
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(structure_router)
app.include_router(content_router)
app.include_router(accessibility_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"status": "ok", "version": APP_VERSION}
