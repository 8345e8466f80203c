"""FastAPI application instance for the funcdiff API."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import FuncDiffError
from ..logging_utils import configure_logging
from ..settings import get_cors_origins
from . import __version__
from .routes import router as api_router

configure_logging()

app = FastAPI(
    title="funcdiff API",
    description="Function-level change analysis between two Git revisions",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(FuncDiffError)
async def funcdiff_exception_handler(request: Request, exc: FuncDiffError):
    """Render known errors escaping a route as an error envelope."""
    return JSONResponse(status_code=500, content={"ok": False, "error": exc.to_dict()})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return a consistent error envelope for uncaught exceptions."""
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": f"Internal server error: {str(exc)}",
                "details": {
                    "exception_type": type(exc).__name__,
                    "path": str(request.url.path),
                },
            },
        },
    )
