from pydantic_settings import BaseSettings, SettingsConfigDict


MESSAGE_MAX_LENGTH_BY_PROFILE = {
    "standard": 1000,
    "extended": 2000,
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    RECAPTCHA_SITE_KEY: str | None = None
    RECAPTCHA_TOKEN_URL: str = "http://127.0.0.1:8080/recaptcha/token"
    BOT_MITIGATION_PROVIDER: str = "recaptcha"  # "recaptcha" | "mock"
    SUBMISSION_ACTION: str = "contact_form"

    SUBMISSION_URL: str | None = None
    SUBMISSION_TIMEOUT_SECONDS: float = 15.0

    DEPLOYMENT_PROFILE: str = "standard"  # "standard" | "extended"
    MESSAGE_MAX_LENGTH: int | None = None

    DRAFT_STORE: str = "json"  # "json" | "memory"
    DRAFT_DATA_DIR: str = "./data/drafts"
    DRAFT_MEMORY_MAX_CLIENTS: int = 1000

    BUSINESS_TIMEZONE: str = "Europe/Madrid"
    AVAILABILITY_INTERVAL_SECONDS: float = 60.0
    BUSINESS_WHATSAPP: str | None = None

    SESSION_IDLE_TIMEOUT_SECONDS: float = 1800.0

    @property
    def message_max_length(self) -> int:
        if self.MESSAGE_MAX_LENGTH:
            return self.MESSAGE_MAX_LENGTH
        return MESSAGE_MAX_LENGTH_BY_PROFILE.get(self.DEPLOYMENT_PROFILE.lower(), 1000)


settings = Settings()
