from __future__ import annotations

from contact_wizard.application.ports.service_catalog import ServiceCatalogPort
from contact_wizard.application.utils.quote_estimate import DEFAULT_PRICE_PER_SQM
from contact_wizard.domain.entities.service_catalog import ServiceCatalogEntry
from contact_wizard.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceCatalogEntry] | None = None) -> None:
        self._catalog = catalog or SERVICE_CATALOG

    def list_services(self) -> list[ServiceCatalogEntry]:
        return list(self._catalog.values())

    def get_service(self, display_name: str) -> ServiceCatalogEntry | None:
        normalized = display_name.lower().strip()
        for entry in self._catalog.values():
            if entry.display_name.lower() == normalized or entry.service_key == normalized:
                return entry
        return None

    def get_price_per_sqm(self, display_name: str) -> int:
        entry = self.get_service(display_name or "")
        if not entry:
            return DEFAULT_PRICE_PER_SQM
        return entry.price_per_sqm
