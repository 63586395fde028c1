"""
brainbender/server.py – HTTP surface
=====================================
  GET /                 static acknowledgement
  GET /health           liveness probe
  GET /make             run the pipeline → {question, videoId} or 500 {error}
  GET /auth             redirect to Google's consent screen (youtube.upload)
  GET /oauth2callback   exchange ?code= for tokens, log the refresh token

Collaborators are built from Config unless passed in, which is how tests swap
in stub encoders and uploaders.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from loguru import logger

from brainbender import __version__
from brainbender.config import Config
from brainbender.pipeline import RiddlePipeline
from brainbender.scheduler import build_scheduler
from brainbender.youtube.auth import YouTubeCredentials

HEALTH_MESSAGE = "Brain Bender Daily API is running."


def build_credentials(cfg: Config) -> YouTubeCredentials:
    credentials = YouTubeCredentials(
        client_id=cfg.client_id,
        client_secret=cfg.client_secret,
        redirect_uri=cfg.redirect_uri,
        refresh_token=cfg.refresh_token,
    )
    if not cfg.oauth_configured:
        logger.warning("[Server] YOUTUBE_CLIENT_ID / YOUTUBE_CLIENT_SECRET missing; uploads and /auth will fail")
    elif not credentials.authorized:
        logger.warning("[Server] No YOUTUBE_REFRESH_TOKEN; visit /auth once to obtain one")
    return credentials


def create_app(
    cfg: Config | None = None,
    credentials: YouTubeCredentials | None = None,
    pipeline: RiddlePipeline | None = None,
) -> FastAPI:
    cfg = cfg or Config.from_env()
    credentials = credentials or build_credentials(cfg)
    pipeline = pipeline or RiddlePipeline.from_config(cfg, credentials)

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler = None
        if cfg.schedule_times:
            scheduler = build_scheduler(cfg.schedule_times, cfg.schedule_timezone, pipeline.run)
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    app = FastAPI(title="Brain Bender Daily", version=__version__, lifespan=_lifespan)

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return HEALTH_MESSAGE

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/make")
    async def make():
        try:
            result = await pipeline.run()
        except Exception as e:
            logger.exception(f"[Server] /make failed: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})
        return result.as_json()

    @app.get("/auth")
    async def auth():
        try:
            url = credentials.authorization_url()
        except Exception as e:
            logger.exception(f"[Server] Could not build consent URL: {e}")
            return PlainTextResponse(f"OAuth is not configured: {e}", status_code=500)
        return RedirectResponse(url, status_code=302)

    @app.get("/oauth2callback")
    async def oauth2callback(code: str | None = None, error: str | None = None):
        if error:
            return PlainTextResponse(f"Authorization was not granted: {error}", status_code=400)
        if not code:
            return PlainTextResponse("Missing code parameter", status_code=400)
        try:
            tokens = await asyncio.to_thread(credentials.exchange_code, code)
        except Exception as e:
            logger.exception(f"[Server] Error exchanging code for tokens: {e}")
            return PlainTextResponse("Authentication error", status_code=500)

        refresh_token = tokens.get("refresh_token")
        if refresh_token:
            logger.info(f"[Auth] REFRESH_TOKEN: {refresh_token}")
        else:
            logger.warning("[Auth] No refresh token returned; revoke access and authorize again with consent")
        return PlainTextResponse("Authorization successful. Refresh token logged to server logs.")

    return app
