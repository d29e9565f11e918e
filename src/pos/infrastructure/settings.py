"""Runtime settings, read from ``POS_*`` environment variables.

Unset variables fall back to the defaults below.  Malformed values raise
ValidationError so a misconfigured terminal fails at start-up rather than
mid-sale.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from pos.domain.exceptions import ValidationError
from pos.domain.model.payment import DEFAULT_PAPER_WIDTH, StoreProfile
from pos.domain.service.invoice_numbers import DEFAULT_INVOICE_PREFIX
from pos.domain.service.pricing import (
    DEFAULT_MAX_EDITABLE_PRICE,
    DEFAULT_QTY_PRECISION,
    PricingPolicy,
    RoundingMode,
)

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

PAPER_WIDTHS = ("58mm", "80mm")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    pricing: PricingPolicy = field(default_factory=PricingPolicy)
    invoice_prefix: str = DEFAULT_INVOICE_PREFIX
    paper_width: str = DEFAULT_PAPER_WIDTH
    store: StoreProfile = field(default_factory=lambda: StoreProfile(name="POS"))
    log_level: str = "INFO"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        paper_width = env.get("POS_PAPER_WIDTH", DEFAULT_PAPER_WIDTH).strip()
        if paper_width not in PAPER_WIDTHS:
            raise ValidationError(
                f"POS_PAPER_WIDTH must be one of {', '.join(PAPER_WIDTHS)}, got {paper_width!r}"
            )

        return Settings(
            data_dir=Path(env.get("POS_DATA_DIR", str(DEFAULT_DATA_DIR))),
            pricing=PricingPolicy(
                qty_precision=_int(env, "POS_QTY_PRECISION", DEFAULT_QTY_PRECISION),
                rounding_mode=RoundingMode.parse(env.get("POS_MONEY_ROUNDING", "floor")),
                max_editable_price=_int(
                    env, "POS_MAX_EDITABLE_PRICE", DEFAULT_MAX_EDITABLE_PRICE
                ),
            ),
            invoice_prefix=env.get("POS_INVOICE_PREFIX", DEFAULT_INVOICE_PREFIX),
            paper_width=paper_width,
            store=StoreProfile(
                name=env.get("POS_STORE_NAME", "POS"),
                address=env.get("POS_STORE_ADDRESS", ""),
                phone=env.get("POS_STORE_PHONE", ""),
                footer=env.get("POS_STORE_FOOTER", StoreProfile.footer),
            ),
            log_level=env.get("POS_LOG_LEVEL", "INFO").upper(),
        )


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer, got {raw!r}") from exc
