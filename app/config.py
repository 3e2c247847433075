from pydantic_settings import BaseSettings
import os

class Settings(BaseSettings):
    upstream_url: str = os.getenv("UPSTREAM_URL", "https://sicbosun-8d67.onrender.com/api/sunwin/sicbo")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", 10))
    retry_attempts: int = int(os.getenv("RETRY_ATTEMPTS", 5))
    retry_delay_ms: int = int(os.getenv("RETRY_DELAY_MS", 2000))
    max_history_length: int = int(os.getenv("MAX_HISTORY", 500))
    cache_key: str = os.getenv("CACHE_KEY", "full_history")
    cache_ttl: float = float(os.getenv("CACHE_TTL", 3600))
    stats_window: int = int(os.getenv("STATS_WINDOW", 30))
    service_id: str = os.getenv("SERVICE_ID", "@taixiu-predictor")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
