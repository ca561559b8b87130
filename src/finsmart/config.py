from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str
    db_echo: bool = False
    # Create missing tables on startup (local development without migrations).
    db_create_all: bool = False

    # JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_access_expire_minutes: int = 30
    jwt_refresh_expire_days: int = 7

    # Money / amounts
    currency: str = "EUR"
    currency_minor_unit: int = 2

    # Goal funding from income
    goal_allocation_rate: float = Field(default=0.10, ge=0, le=1)
    goal_allocation_max_attempts: int = Field(default=3, ge=1)
    goal_allocation_completes_goals: bool = False

    # Goals
    max_active_goals: int = Field(default=10, ge=1)
    goal_contribution_subcategory: str = "ahorro_meta"
    goal_contribution_description: str = "Goal contribution"
    goal_due_soon_days: int = 30


settings = Settings()
