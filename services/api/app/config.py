from pydantic import BaseModel
import os

class Settings(BaseModel):
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))
    user_agent: str = os.getenv("USER_AGENT", "tibet-news-aggregator/1.0")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "25"))
    source_timeout: float = float(os.getenv("SOURCE_TIMEOUT", "120"))
    fetch_concurrency: int = int(os.getenv("FETCH_CONCURRENCY", "10"))
    refresh_every_min: int = int(os.getenv("REFRESH_EVERY_MIN", "30"))
    scheduler_enabled: bool = os.getenv("SCHEDULER_ENABLED", "1") == "1"
    tz: str = os.getenv("TZ", "UTC")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
