"""ASGI entry point: `cookbook_club.main:app`."""

from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from cookbook_club import __version__
from cookbook_club.api.exception_handlers import register_exception_handlers
from cookbook_club.api.v1.router import api_router
from cookbook_club.core.config import settings

app = FastAPI(
    title="Cookbook Club",
    description="Members, meetups, recipes and reminders for a single cooking club.",
    version=__version__,
)


def cors_origin(frontend_url: str) -> str:
    """Scheme and host of the frontend URL, without any path."""
    parsed = urlparse(frontend_url)
    return f"{parsed.scheme}://{parsed.netloc}"


if settings.frontend_url:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cors_origin(settings.frontend_url)],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*", "X-Actor-Id"],
    )

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}
