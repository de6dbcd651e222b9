from __future__ import annotations

from contact_wizard.domain.entities.service_catalog import ServiceCatalogEntry


SERVICE_CATALOG: dict[str, ServiceCatalogEntry] = {
    "full_renovation": ServiceCatalogEntry("full_renovation", "Full Renovation", 650),
    "new_construction": ServiceCatalogEntry("new_construction", "New Construction", 900),
    "rehabilitation": ServiceCatalogEntry("rehabilitation", "Rehabilitation", 500),
    "interior_design": ServiceCatalogEntry("interior_design", "Interior Design", 250),
    "commercial_projects": ServiceCatalogEntry("commercial_projects", "Commercial Projects", 800),
    "other": ServiceCatalogEntry("other", "Other", 550),
}
