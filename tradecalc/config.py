"""Runtime settings read from the environment.

| variable                  | default                                         |
|---------------------------|-------------------------------------------------|
| TRADECALC_PRICE_URL       | https://api.binance.com/api/v3/ticker/price     |
| TRADECALC_HTTP_TIMEOUT    | 10 (seconds)                                    |
| TRADECALC_FEE_SCHEDULE    | unset: built-in Binance spot schedule           |
| TRADECALC_PRICE_SNAPSHOT  | config/price_snapshot.json                      |
| TRADECALC_LOG_LEVEL       | INFO                                            |
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from tradecalc.errors import ConfigError
from tradecalc.market_data.ticker import HttpPriceProvider

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_PRICE_SNAPSHOT = ROOT / "config" / "price_snapshot.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    price_url: str = HttpPriceProvider.DEFAULT_URL
    http_timeout: float = float(HttpPriceProvider.DEFAULT_TIMEOUT)
    fee_schedule_path: Optional[Path] = None
    price_snapshot_path: Path = DEFAULT_PRICE_SNAPSHOT
    log_level: str = "INFO"

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigError: If the timeout is not a positive number or the log
                level is unknown
        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get("TRADECALC_HTTP_TIMEOUT", "").strip()
        timeout = float(HttpPriceProvider.DEFAULT_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ConfigError(f"TRADECALC_HTTP_TIMEOUT must be a number, got {raw_timeout!r}") from exc
            if timeout <= 0:
                raise ConfigError(f"TRADECALC_HTTP_TIMEOUT must be positive, got {raw_timeout!r}")

        log_level = env.get("TRADECALC_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"TRADECALC_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}")

        schedule = env.get("TRADECALC_FEE_SCHEDULE", "").strip()
        snapshot = env.get("TRADECALC_PRICE_SNAPSHOT", "").strip()

        return cls(
            price_url=env.get("TRADECALC_PRICE_URL", "").strip() or HttpPriceProvider.DEFAULT_URL,
            http_timeout=timeout,
            fee_schedule_path=Path(schedule) if schedule else None,
            price_snapshot_path=Path(snapshot) if snapshot else DEFAULT_PRICE_SNAPSHOT,
            log_level=log_level,
        )
