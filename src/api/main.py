"""
FastAPI application entry-point.
"""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import analytics, companies
from src.core.config import get_settings

app = FastAPI(
    title="Market Intel Search",
    version="0.1.0",
    description="Structured company search, pagination and chart bucketing",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(companies.router, prefix="/companies", tags=["Companies"])
app.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])


@app.get("/health")
def health():
    return {"status": "ok"}


def run() -> None:
    """Serve the API with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("src.api.main:app", host="0.0.0.0", port=get_settings().api_port)


if __name__ == "__main__":
    run()
