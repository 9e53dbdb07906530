"""
FastAPI main application for the signal backtesting engine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from signal_backtester.core.exceptions.backtest import BacktestException

from .routers import backtest
from .schemas.api_models import ErrorResponse

app = FastAPI(
    title="Signal Backtesting API",
    version="1.0.0",
    description="API for indicator-consensus strategy backtesting and preset optimization",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development frontend
        "http://localhost:8080",  # Alternative development port
    ],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
)

app.include_router(backtest.router, prefix="/api/backtest", tags=["backtest"])


@app.exception_handler(BacktestException)
async def backtest_exception_handler(request: Request, exc: BacktestException) -> JSONResponse:
    """Map domain errors to 400 responses."""
    logger.warning(f"Request to {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=type(exc).__name__, message=str(exc)).model_dump(),
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint returning API information."""
    return {"message": "Signal Backtesting API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
