from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./estimator.db"
    COMPANY_NAME: str = "Plumbing Co."
    COMPANY_EMAIL: str = ""
    COMPANY_PHONE: str = ""

    # Fallbacks for estimate factors that arrive missing or non-numeric
    LOCATION_FACTOR_DEFAULT: float = 1.0
    OVERHEAD_PCT_DEFAULT: float = 0.10
    TAX_PCT_DEFAULT: float = 0.08

    QUOTE_VALID_DAYS: int = 30
    SEED_ON_STARTUP: bool = True
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
