#!/usr/bin/env python3
"""
Prepare a JSON ledger and print its performance.

The ledger is a JSON list of transactions in the /performance request format.
Usage: from project root:
  python scripts/run_pipeline.py ledger.json --currency EUR --method WAC
"""
import argparse
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter

from portfolio_performance.api.schemas import PerformanceResponse, TransactionIn
from portfolio_performance.api.deps import get_market_provider
from portfolio_performance.config.logging_config import setup_logging
from portfolio_performance.config.settings import get_settings
from portfolio_performance.core import AppError, now_utc, parse_datetime_utc
from portfolio_performance.domain.models import CostBasisMethod, Currency
from portfolio_performance.repositories import InMemoryCache
from portfolio_performance.repositories.sqlalchemy import SqlAlchemyCache, get_session, init_db
from portfolio_performance.services import MarketDataService, get_performance_engine, run_pipeline


def parse_args(argv=None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("ledger", type=Path, help="Path to the JSON ledger")
    parser.add_argument("--currency", type=Currency, default=settings.base_currency)
    parser.add_argument("--method", type=CostBasisMethod, default=CostBasisMethod.FIFO)
    parser.add_argument("--start", type=parse_datetime_utc, help="Window start (default: first transaction)")
    parser.add_argument("--end", type=parse_datetime_utc, help="Window end (default: now)")
    parser.add_argument("--eps", type=float, default=settings.filter_epsilon)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    setup_logging()
    args = parse_args(argv)
    settings = get_settings()

    transactions = [
        t.to_domain()
        for t in TypeAdapter(list[TransactionIn]).validate_json(args.ledger.read_text())
    ]
    transactions.sort(key=lambda t: t.time)
    if not transactions:
        print("Ledger is empty", file=sys.stderr)
        return 1

    end = args.end or now_utc()
    start = args.start or transactions[0].time

    session = None
    if settings.cache_database_url:
        init_db()
        session = get_session()
        cache = SqlAlchemyCache(session)
    else:
        cache = InMemoryCache()

    try:
        market_data = MarketDataService(
            provider=get_market_provider(),
            cache=cache,
            ticker_ttl_seconds=settings.ticker_cache_ttl_seconds,
            stock_split_ttl_seconds=settings.stock_split_cache_ttl_seconds,
            split_horizon=end,
        )
        prepared = run_pipeline(
            transactions,
            market_data,
            args.currency,
            until=end,
            eps=args.eps,
            correct_splits=args.method != CostBasisMethod.WAC,
            max_lookback_days=settings.fx_max_lookback_days,
        )
        engine = get_performance_engine(args.method, market_data)
        performance = engine.get_performance(prepared, start, end, args.currency)
    except AppError as e:
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return 1
    finally:
        if session is not None:
            session.close()

    print(json.dumps(PerformanceResponse.from_domain(performance).model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
