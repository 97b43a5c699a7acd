"""
Pricing engine: pure, synchronous functions from request to priced result.

Components (leaves first):
  volume_curve  → discount by quantity (stepped / smooth ladders)
  term_curve    → discount by commitment length
  environment   → multiplier by deployment environment
  line_item     → one SKU line priced
  phases        → duration-weighted package total
  perpetual     → one-time purchase vs. recurring break-even
  statistics    → peak / average / P90 / P95 of a usage series
  timeseries    → pay-per-use or fixed-commitment billing
  orchestrator  → top-level dispatch
"""

from quote_pricing.engine.orchestrator import parse_request, price_package, price_payload

__all__ = ["parse_request", "price_package", "price_payload"]
