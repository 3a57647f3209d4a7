"""FastAPI application setup for the pool-time service."""

from fastapi import FastAPI

from .api import router as api_router

app = FastAPI(title="Pool Time")

# API routes
app.include_router(api_router, prefix="/v1")
