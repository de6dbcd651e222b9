from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCatalogEntry:
    service_key: str
    display_name: str
    price_per_sqm: int  # EUR, used by the quick estimator
