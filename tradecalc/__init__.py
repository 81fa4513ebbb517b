"""Trading-fee and portfolio-risk calculation engine.

Subpackages:

- fees: tiered fee schedules, fee calculation and fee tracking
- market_data: price providers (HTTP ticker, static snapshot, fallback)
- risk: exposure/concentration reporting, exposure limits, volatility helpers

Shared data model lives in `tradecalc.types`, the error taxonomy in
`tradecalc.errors`.
"""

__version__ = "0.1.0"
