# sentra/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import RedirectResponse

from . import config

log = logging.getLogger("uvicorn.error")


def create_app() -> FastAPI:
    prefix = config.api_prefix()

    app = FastAPI(
        title="Sentra Triage API",
        version="1.0.0",
        description="Incident triage for the responder feed (priority, duplicates, verification).",
    )

    # ---------------- CORS ----------------
    # Prefer explicit origins via CORS_ORIGINS; for local dev allow any localhost port.
    cors_kwargs = dict(allow_methods=["*"], allow_headers=["*"], allow_credentials=True)
    origins = config.cors_origins()
    if origins:
        cors_kwargs.update(allow_origins=origins)
    else:
        cors_kwargs.update(allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$")

    app.add_middleware(CORSMiddleware, **cors_kwargs)
    log.info("CORS configured: %s", cors_kwargs)

    # ---------------- Routers ----------------
    try:
        from .routes.feed import router as feed_router
        app.include_router(feed_router, prefix=prefix)
    except Exception as e:
        log.exception("Failed to include triage router: %s", e)

    try:
        from .routes.incident import router as incident_router
        app.include_router(incident_router, prefix=prefix)
    except Exception as e:
        log.exception("Failed to include incident router: %s", e)

    # ---------------- Meta/utility ----------------
    @app.get("/", include_in_schema=False)
    def root() -> RedirectResponse:
        # Visiting the root opens Swagger UI
        return RedirectResponse(url="/docs")

    @app.get(f"{prefix}/health", tags=["meta"])
    def health():
        return {"status": "ok", "prefix": prefix}

    return app


app = create_app()


# ---------------- Local dev entrypoint ----------------
def run() -> None:
    import uvicorn

    logging.basicConfig(level=config.LOG_LEVEL)
    uvicorn.run("sentra.main:app", host="0.0.0.0", port=config.PORT, reload=True)


if __name__ == "__main__":
    run()
