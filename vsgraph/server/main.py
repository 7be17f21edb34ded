"""
FastAPI server exposing the vsgraph compiler to the editor front-end.

Start with:
    python -m vsgraph.server.main

Or via uvicorn directly:
    uvicorn vsgraph.server.main:app --port 3001 --reload
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vsgraph import __version__
from vsgraph.config import load_settings
from vsgraph.server.routes.graph_routes import router

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(title="vsgraph API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run() -> None:
    import uvicorn

    uvicorn.run(
        "vsgraph.server.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
