"""Position and performance endpoints."""

from fastapi import APIRouter, Depends

from portfolio_performance.api.deps import get_market_data_service
from portfolio_performance.api.schemas import (
    LedgerRequest,
    PerformanceRequest,
    PerformanceResponse,
    PerformanceSeriesPointResponse,
    PerformanceSeriesRequest,
    PerformanceSeriesResponse,
    PositionsResponse,
)
from portfolio_performance.config.settings import get_settings
from portfolio_performance.services import (
    MarketDataService,
    get_performance_engine,
    get_performance_series,
    get_positions,
)

router = APIRouter(tags=["performance"])


@router.post("/positions", response_model=PositionsResponse)
def post_positions(request: LedgerRequest) -> PositionsResponse:
    """Replay the ledger and return holdings at the window end."""
    positions = get_positions(request.start, request.end, request.to_domain())
    return PositionsResponse.from_domain(positions)


@router.post("/performance", response_model=PerformanceResponse)
def post_performance(
    request: PerformanceRequest,
    market_data: MarketDataService = Depends(get_market_data_service),
) -> PerformanceResponse:
    """Value the window and split P/L under the requested cost basis method."""
    currency = request.currency or get_settings().base_currency
    engine = get_performance_engine(request.method, market_data)
    performance = engine.get_performance(request.to_domain(), request.start, request.end, currency)
    return PerformanceResponse.from_domain(performance)


@router.post("/performance/series", response_model=PerformanceSeriesResponse)
def post_performance_series(
    request: PerformanceSeriesRequest,
    market_data: MarketDataService = Depends(get_market_data_service),
) -> PerformanceSeriesResponse:
    """Performance for consecutive windows of interval_days."""
    currency = request.currency or get_settings().base_currency
    engine = get_performance_engine(request.method, market_data)
    series = get_performance_series(
        engine,
        request.to_domain(),
        request.start,
        request.end,
        request.interval_days,
        currency,
    )
    return PerformanceSeriesResponse(
        points=[PerformanceSeriesPointResponse.from_domain(point) for point in series]
    )
