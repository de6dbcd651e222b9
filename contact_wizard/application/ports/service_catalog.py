from __future__ import annotations

from abc import ABC, abstractmethod

from contact_wizard.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def list_services(self) -> list[ServiceCatalogEntry]:
        """All services offered in the form, in display order."""
        raise NotImplementedError

    @abstractmethod
    def get_service(self, display_name: str) -> ServiceCatalogEntry | None:
        """Get catalog entry by its display name (the value stored in the form)."""
        raise NotImplementedError

    @abstractmethod
    def get_price_per_sqm(self, display_name: str) -> int:
        """Per-m2 rate for the estimator. Returns the default rate if unknown."""
        raise NotImplementedError
