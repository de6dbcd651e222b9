from __future__ import annotations

from dataclasses import dataclass


DEFAULT_PRICE_PER_SQM = 550
QUALITY_FACTORS = {
    "Basic": 0.85,
    "Standard": 1.0,
    "High": 1.25,
}
MIN_SQM = 10
MAX_SQM = 250


@dataclass(frozen=True)
class QuoteEstimate:
    square_meters: int
    quality: str
    low: int
    high: int


def estimate_quote(square_meters: int, quality: str, price_per_sqm: int = DEFAULT_PRICE_PER_SQM) -> QuoteEstimate:
    """Indicative range only: base * quality factor, widened to -10% / +15%."""
    if quality not in QUALITY_FACTORS:
        raise ValueError(f"Unknown quality level: {quality}")
    if not MIN_SQM <= square_meters <= MAX_SQM:
        raise ValueError(f"Surface must be between {MIN_SQM} and {MAX_SQM} m2")
    estimate = round(square_meters * price_per_sqm * QUALITY_FACTORS[quality])
    return QuoteEstimate(
        square_meters=square_meters,
        quality=quality,
        low=round(estimate * 0.9),
        high=round(estimate * 1.15),
    )


def format_estimate_line(estimate: QuoteEstimate, service: str) -> str:
    return (
        f"\n\nIndicative estimate: {estimate.square_meters} m2, {estimate.quality}, "
        f"{service or 'Service to be defined'} -> {estimate.low:,} EUR - {estimate.high:,} EUR"
    )


def whatsapp_link(number: str | None) -> str:
    digits = "".join(ch for ch in (number or "") if ch.isdigit())
    return f"https://wa.me/{digits}" if digits else ""
