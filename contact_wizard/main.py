import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from contact_wizard.api.v1.inquiries import router as inquiries_router
from contact_wizard.core.config import settings
from contact_wizard.wiring.sessions import get_session_registry

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("session_id", "step", "field", "event", "reason", "attachment_count"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    get_session_registry().close_all()


app = FastAPI(title="Contact Inquiry Wizard", version="1.0.0", lifespan=lifespan)

app.include_router(inquiries_router, prefix="/api/v1/inquiries", tags=["inquiries"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
