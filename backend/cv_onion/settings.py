import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


API_TITLE = "CV Onion"
API_DESCRIPTION = "Peel back the layers of job matching with AI: CV analysis, job description analysis and CV-to-job matching using Gemini"
API_VERSION = "0.1.0"

DEFAULT_MODEL_NAME = "gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    google_api_key: Optional[str] = None
    gemini_model_name: str = DEFAULT_MODEL_NAME
    gemini_temperature: float = 0.2
    log_level: str = "INFO"
    rate_limit: str = "20/hour"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @property
    def is_prod(self) -> bool:
        return self.env in {"prod", "production"}


def get_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return Settings(
        env=os.getenv("ENV", "dev").lower(),
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        gemini_model_name=os.getenv("GEMINI_MODEL_NAME", DEFAULT_MODEL_NAME),
        gemini_temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.2")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        rate_limit=os.getenv("RATE_LIMIT", "20/hour"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
