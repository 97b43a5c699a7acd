"""
Quote Pricing Engine: Main Entry Point

Price a serialized package request (CLI):
    python -m quote_pricing path/to/request.json

Run as an API server:
    python -m quote_pricing --serve
    # or: uvicorn quote_pricing.api:app --reload --port 8000

Or import and run programmatically:
    from quote_pricing.main import run
    result = run("path/to/request.json")
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from quote_pricing.config import get_settings
from quote_pricing.engine.orchestrator import price_payload
from quote_pricing.utils.logger import setup_logging


def run(request_path: str) -> dict:
    """Price the package request stored at `request_path` and return the result."""
    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)

    payload = json.loads(Path(request_path).read_text(encoding="utf-8"))
    logger.info(f"Pricing request from {request_path}")

    result = price_payload(payload)
    _log_summary(result)
    return result


def _log_summary(result: dict) -> None:
    """Log a human-readable summary of a priced result."""
    logger = logging.getLogger(__name__)

    logger.info("-" * 60)
    logger.info("  PRICING RESULT SUMMARY")
    logger.info("-" * 60)

    if result.get("mode") == "phased":
        for phase in result.get("phases", []):
            logger.info(
                f"  Phase {phase['index']}: {phase['duration_months']} mo, "
                f"{len(phase['line_items'])} item(s), ${phase['subtotal_monthly']:,.2f}/mo"
            )
        logger.info(f"  Monthly (weighted): ${result['subtotal_monthly']:,.2f}")
        logger.info(f"  Annual:             ${result['subtotal_annual']:,.2f}")
        logger.info(f"  Contract value:     ${result['total_contract_value']:,.2f}")
    else:
        logger.info(f"  Model:          {result.get('model_kind')}")
        if result.get("commitment_tier_used"):
            logger.info(f"  Committed on:   {result['commitment_tier_used']}")
        logger.info(f"  Billed monthly: ${result['billed_monthly']:,.2f}")
        logger.info(f"  Billed total:   ${result['billed_total']:,.2f}")

    comparison = result.get("perpetual")
    if comparison:
        months = comparison.get("break_even_months")
        break_even = f"{months:,.1f} months" if months is not None else "undefined"
        logger.info(f"  Perpetual:      ${comparison['upfront_price']:,.2f} (break-even {break_even})")

    logger.info("-" * 60)


def serve() -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting API server on {settings.api_host}:{settings.api_port}")
    uvicorn.run("quote_pricing.api:app", host=settings.api_host, port=settings.api_port,
                reload=settings.debug)


def cli() -> None:
    if "--serve" in sys.argv:
        serve()
    elif len(sys.argv) > 1:
        print(json.dumps(run(sys.argv[1]), indent=2))
    else:
        print("usage: python -m quote_pricing <request.json> | --serve", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    cli()
