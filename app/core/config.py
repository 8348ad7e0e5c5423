from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # Presence registry
    PRESENCE_CLEANUP_MINUTES: int = 30
    PRESENCE_CLEANUP_INTERVAL_SECONDS: int = 60

    # Dashboard
    DASHBOARD_RECENT_LIMIT: int = 10
    DASHBOARD_CHART_DAYS: int = 7

    # Rate limiting
    RATE_LIMIT_DEFAULT: str = "1000/minute"

    def validate_settings(self) -> list[str]:
        """Validate value ranges. Returns list of errors."""
        errors = []
        if self.PRESENCE_CLEANUP_MINUTES < 1:
            errors.append("PRESENCE_CLEANUP_MINUTES must be at least 1")
        if self.PRESENCE_CLEANUP_INTERVAL_SECONDS < 1:
            errors.append("PRESENCE_CLEANUP_INTERVAL_SECONDS must be at least 1")
        if self.DASHBOARD_RECENT_LIMIT < 0:
            errors.append("DASHBOARD_RECENT_LIMIT cannot be negative")
        if self.DASHBOARD_CHART_DAYS < 1:
            errors.append("DASHBOARD_CHART_DAYS must be at least 1")
        return errors

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
