from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

from staffhub.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "StaffHub API"
    APP_VERSION: str = "1.0.0"
    DEV_MODE: bool = True  # Set to False in production
    FRONTEND_URL: str = "http://localhost:3000"  # SPA origin allowed by CORS
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Hosted backend (database + identity)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""  # Optional: verify access tokens locally
    SUPABASE_TIMEOUT_SECONDS: float = 10.0

    # Google Drive OAuth callback (recorded in build info)
    GOOGLE_REDIRECT_URI: str = ""

    # Feature flags
    FEATURE_MESSAGE_SENDING: bool = True
    FEATURE_ADMIN_API: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"

    def missing_browser_fields(self) -> List[str]:
        """Public fields needed by anon-key (browser-equivalent) calls."""
        return [
            name for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY")
            if not getattr(self, name)
        ]

    def missing_server_fields(self) -> List[str]:
        """All fields a trusted server process needs."""
        missing = self.missing_browser_fields()
        if not self.SUPABASE_SERVICE_ROLE_KEY:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing

    def validate_for_server(self) -> "Settings":
        """
        Fail fast when the backend endpoint or keys are missing.

        Raises:
            ConfigurationError: listing every missing variable
        """
        missing = self.missing_server_fields()
        if missing:
            raise ConfigurationError(
                f"Missing backend configuration: {', '.join(missing)}",
                missing=missing
            )
        return self

    @property
    def backend_configured(self) -> bool:
        return not self.missing_browser_fields()

    @property
    def service_key_configured(self) -> bool:
        return bool(self.SUPABASE_SERVICE_ROLE_KEY)


@lru_cache
def get_settings() -> Settings:
    """Assemble settings once per process."""
    return Settings()
