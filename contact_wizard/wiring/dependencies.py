from collections import OrderedDict
from functools import lru_cache
import logging
import re
from pathlib import Path
from uuid import uuid4
from zoneinfo import ZoneInfo

from contact_wizard.core.config import settings
from contact_wizard.application.ports.bot_mitigation import BotMitigationPort
from contact_wizard.application.ports.key_value_store import KeyValueStorePort
from contact_wizard.application.ports.service_catalog import ServiceCatalogPort
from contact_wizard.application.ports.submission import SubmissionPort
from contact_wizard.application.ports.telemetry import TelemetryPort
from contact_wizard.application.use_cases.business_hours import AvailabilityMonitor
from contact_wizard.application.use_cases.inquiry_wizard import InquiryWizard
from contact_wizard.infrastructure.bot_mitigation.mock_provider import MockBotMitigation
from contact_wizard.infrastructure.bot_mitigation.recaptcha_provider import RecaptchaTokenProvider
from contact_wizard.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from contact_wizard.infrastructure.store.json_store import JsonKeyValueStore
from contact_wizard.infrastructure.store.memory_store import MemoryKeyValueStore
from contact_wizard.infrastructure.submission.http_client import HttpSubmissionClient
from contact_wizard.infrastructure.submission.mock_client import MockSubmissionClient
from contact_wizard.infrastructure.telemetry.logging_telemetry import LoggingTelemetry


_CLIENT_ID = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")

# Least recently used client drafts are evicted past DRAFT_MEMORY_MAX_CLIENTS.
_memory_stores: OrderedDict[str, MemoryKeyValueStore] = OrderedDict()


def get_bot_mitigation() -> BotMitigationPort | None:
    """Without a site key the provider is never constructed; every submission then fails with ConfigurationError."""
    logger = logging.getLogger(__name__)
    if not settings.RECAPTCHA_SITE_KEY:
        logger.warning("RECAPTCHA_SITE_KEY missing; submissions are disabled")
        return None
    if settings.BOT_MITIGATION_PROVIDER.lower() == "mock":
        logger.info("Using MockBotMitigation")
        return MockBotMitigation(site_key=settings.RECAPTCHA_SITE_KEY)
    return RecaptchaTokenProvider(
        site_key=settings.RECAPTCHA_SITE_KEY,
        token_url=settings.RECAPTCHA_TOKEN_URL,
    )


def get_submission_client() -> SubmissionPort:
    logger = logging.getLogger(__name__)
    if not settings.SUBMISSION_URL:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockSubmissionClient (SUBMISSION_URL missing, ENV=dev/local)")
            return MockSubmissionClient()
        raise ValueError("SUBMISSION_URL is required to send inquiries.")
    return HttpSubmissionClient(
        endpoint=settings.SUBMISSION_URL,
        timeout=settings.SUBMISSION_TIMEOUT_SECONDS,
    )


def _memory_store_for(client_id: str) -> MemoryKeyValueStore:
    store = _memory_stores.get(client_id)
    if store is None:
        store = MemoryKeyValueStore()
        _memory_stores[client_id] = store
    _memory_stores.move_to_end(client_id)
    while len(_memory_stores) > settings.DRAFT_MEMORY_MAX_CLIENTS:
        _memory_stores.popitem(last=False)
        logging.getLogger(__name__).info("Evicting in-memory draft store", extra={"reason": "capacity"})
    return store


def get_draft_store(client_id: str) -> KeyValueStorePort:
    """Drafts are namespaced per client so a returning browser finds its own draft."""
    if not _CLIENT_ID.match(client_id):
        raise ValueError(f"Invalid client id: {client_id!r}")
    if settings.DRAFT_STORE.lower() == "memory":
        return _memory_store_for(client_id)
    return JsonKeyValueStore(data_dir=str(Path(settings.DRAFT_DATA_DIR) / client_id))


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_telemetry() -> TelemetryPort:
    return LoggingTelemetry()


def get_availability_monitor() -> AvailabilityMonitor:
    return AvailabilityMonitor(
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
        interval_seconds=settings.AVAILABILITY_INTERVAL_SECONDS,
    )


def build_wizard(client_id: str | None = None, session_id: str | None = None) -> InquiryWizard:
    session_id = session_id or uuid4().hex
    return InquiryWizard(
        submission=get_submission_client(),
        bot_mitigation=get_bot_mitigation(),
        draft_store=get_draft_store(client_id or session_id),
        catalog=get_service_catalog(),
        telemetry=get_telemetry(),
        availability=get_availability_monitor(),
        message_max_length=settings.message_max_length,
        action=settings.SUBMISSION_ACTION,
        whatsapp_number=settings.BUSINESS_WHATSAPP,
        session_id=session_id,
    )
