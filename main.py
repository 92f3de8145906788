import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.image_route import router as image_router
from routes.session_route import router as session_router
from services.openai.image_synthesizer import ImageSynthesisClient
from services.openai.style_analyzer import StyleAnalysisClient
from services.session.session_store import SessionStore
from services.session.style_session import StyleSession
from utils.app_config import AppConfig, load_config

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

LOGGER = logging.getLogger(__name__)


def build_openai_client(config: AppConfig) -> AsyncOpenAI:
    """Create the shared async client. Retries are disabled: one attempt per call."""
    try:
        return AsyncOpenAI(api_key=config.api_key, max_retries=0, timeout=config.timeout)
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc


def build_session_store(openai_client: Any, config: AppConfig) -> SessionStore:
    """Wire both remote clients into a store that creates sessions on demand."""
    analyzer = StyleAnalysisClient(openai_client, config)
    synthesizer = ImageSynthesisClient(openai_client, config)
    return SessionStore(lambda session_id: StyleSession(session_id, analyzer, synthesizer))


def create_app(config: Optional[AppConfig] = None, openai_client: Any = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    `config` and `openai_client` are resolved during startup when not given;
    a missing OPENAI_API_KEY aborts startup with ConfigurationError.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the application configuration (credential and model ids)
          - the OpenAI async client
          - the in-memory session store
        and attach them to `app.state`.
        """
        app_config = config or load_config()
        logging.basicConfig(
            level=app_config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        LOGGER.info("Starting with %r", app_config)

        client = openai_client if openai_client is not None else build_openai_client(app_config)
        app.state.config = app_config
        app.state.openai_client = client
        app.state.session_store = build_session_store(client, app_config)

        try:
            yield
        finally:
            app.state.session_store.close_all()
            # Only close clients created here; injected ones belong to the caller.
            if openai_client is None:
                close = getattr(client, "close", None)
                if close is not None:
                    try:
                        result = close()
                        if inspect.isawaitable(result):
                            await result
                    except Exception as exc:
                        LOGGER.warning("Error while closing OpenAI client: %s", exc)

    app = FastAPI(title="Creaura", lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports configured models and client presence.
        """
        app_config = getattr(request.app.state, "config", None)
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "openai_available": has_openai,
            "analysis_model": app_config.analysis_model if app_config else None,
            "synthesis_model": app_config.synthesis_model if app_config else None,
            "sessions": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(session_router)
    app.include_router(image_router)

    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run("main:app", host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
