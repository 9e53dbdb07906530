"""
Backtest API endpoints.
"""

from typing import Any

from fastapi import APIRouter

from signal_backtester.core.enums import StrategyType
from signal_backtester.engine import PRESET_CATALOG, run_backtest, run_strategy_optimizer

from ..schemas.api_models import BacktestRequest, ErrorResponse, PresetsResponse

router = APIRouter(responses={400: {"model": ErrorResponse}})


@router.get("/presets", response_model=PresetsResponse)
async def list_presets() -> dict[str, list[dict]]:
    """List the preset catalog scanned by the optimizer."""
    return {"presets": [preset.to_dict() for preset in PRESET_CATALOG]}


@router.post("/")
def submit_backtest(request: BacktestRequest) -> dict[str, Any]:
    """Run a backtest; AUTO_CONFIG requests run the preset optimizer."""
    result = run_backtest(request.to_series(), request.config.to_config())
    return result.to_dict()


@router.post("/optimize")
def optimize_strategy(request: BacktestRequest) -> dict[str, Any]:
    """Run the preset optimizer regardless of the requested strategy type."""
    config = request.config.model_copy(update={"strategy_type": StrategyType.AUTO_CONFIG})
    result = run_strategy_optimizer(request.to_series(), config.to_config())
    return result.to_dict()
