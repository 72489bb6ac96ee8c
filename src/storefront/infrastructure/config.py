"""Runtime settings, read from ``STOREFRONT_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from storefront.domain.model.value_objects import DEFAULT_CURRENCY

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    database_url: str | None = None
    currency: str = DEFAULT_CURRENCY
    log_level: str = "WARNING"
    log_json: bool = False
    cart_retries: int = 5

    @property
    def resolved_database_url(self) -> str:
        """SQLite file inside the data directory unless a URL is configured."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir / 'storefront.db'}"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        retries = env.get("STOREFRONT_CART_RETRIES", "5")
        try:
            cart_retries = int(retries)
        except ValueError as exc:
            raise ValueError(f"STOREFRONT_CART_RETRIES must be an integer, got {retries!r}") from exc
        if cart_retries < 1:
            raise ValueError("STOREFRONT_CART_RETRIES must be at least 1")

        data_dir = env.get("STOREFRONT_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            database_url=env.get("STOREFRONT_DATABASE_URL") or None,
            currency=env.get("STOREFRONT_CURRENCY", DEFAULT_CURRENCY).upper(),
            log_level=env.get("STOREFRONT_LOG_LEVEL", "WARNING").upper(),
            log_json=env.get("STOREFRONT_LOG_JSON", "").lower() in ("1", "true", "yes"),
            cart_retries=cart_retries,
        )
