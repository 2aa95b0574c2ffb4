"""
Chord Dice HTTP API.

Run locally with::

    uvicorn api.main:app --reload

``CORS_ORIGINS`` (comma-separated) overrides the allowed browser origins.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.routes.accounts import router as accounts_router
from api.routes.practice import router as practice_router
from api.routes.progressions import router as progressions_router
from api.routes.referrals import router as referrals_router
from api.routes.roll import router as roll_router
from infrastructure.metrics import get_metrics_response

# Vite dev server; browsers treat localhost and 127.0.0.1 as different origins
_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"

_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()]

app = FastAPI(title="Chord Dice")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(roll_router)
app.include_router(accounts_router)
app.include_router(referrals_router)
app.include_router(progressions_router)
app.include_router(practice_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint (text exposition format)."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
