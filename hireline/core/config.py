import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class AISettings(BaseModel):
    api_key: Optional[str] = Field(default=os.getenv("LLM_API_KEY"))
    base_url: str = Field(default=os.getenv("LLM_BASE_URL", "https://api.openai.com/v1"))
    model_name: str = Field(default=os.getenv("AI_MODEL_NAME", "gpt-4o-mini"))
    fallback_model: Optional[str] = Field(default=os.getenv("AI_FALLBACK_MODEL") or None)
    kill_switch: bool = Field(default=os.getenv("AI_KILL_SWITCH", "false").lower() == "true")
    timeout_seconds: float = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))
    max_retries: int = int(os.getenv("AI_MAX_RETRIES", "3"))  # retries after the first attempt
    temperature: float = float(os.getenv("AI_TEMPERATURE", "0.7"))
    max_tokens: int = int(os.getenv("AI_MAX_TOKENS", "1500"))
    force_json: bool = Field(default=os.getenv("AI_FORCE_JSON", "true").lower() == "true")

class Config(BaseModel):
    app_name: str = "Hireline"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./hireline.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    refresh_token_expire_days: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

    # Resume file store
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads/resumes")
    max_upload_mb: int = int(os.getenv("MAX_UPLOAD_MB", "10"))

    # AI provider
    ai: AISettings = AISettings()

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"))

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
else:
    if "dev-only" in settings.secret_key:
        _logger.warning("⚠ Using insecure default SECRET_KEY, only acceptable in development.")
