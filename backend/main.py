"""Run the quote API with uvicorn.

HOST, PORT, UVICORN_WORKERS, UVICORN_KEEPALIVE and UVICORN_RELOAD are read
from the environment (and `.env`). Reload is off unless asked for, since
uvicorn ignores the worker count when it is on.
"""

import os
from importlib.metadata import PackageNotFoundError, version

from dotenv import load_dotenv
from fastapi.openapi.utils import get_openapi

load_dotenv()

from leadquote.main import app  # noqa: E402  settings read the env loaded above


def _package_version() -> str:
    try:
        return version("leadquote")
    except PackageNotFoundError:
        return "0.0.0"


def custom_openapi() -> dict:
    """OpenAPI schema for the widget-facing quote endpoints."""
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title="Lead Quote Pricing API",
        version=_package_version(),
        description="Instant price estimates for embeddable lead-capture widgets.",
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi


if __name__ == "__main__":
    import uvicorn

    reload = os.getenv("UVICORN_RELOAD", "").strip().lower() in {"1", "true", "yes", "on"}
    uvicorn.run(
        "leadquote.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload,
        workers=1 if reload else int(os.getenv("UVICORN_WORKERS", "1")),
        timeout_keep_alive=int(os.getenv("UVICORN_KEEPALIVE", "65")),
    )
