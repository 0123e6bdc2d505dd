from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


PLACEHOLDER_SUPABASE_MARKER = "your-supabase-url"


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Server-side writes bypass RLS with this key

    # Rate limits (slowapi format, e.g. "100/minute")
    rate_limit: str = "100/minute"
    funnel_list_rate_limit: str = "100/minute"
    funnel_create_rate_limit: str = "10/minute"
    sync_user_rate_limit: str = "5/minute"

    # Edge middleware
    session_cookie_name: str = "sb-access-token"
    protected_path_prefixes: str = "/builder"
    auth_path_prefix: str = "/auth"
    login_path: str = "/auth/login"
    app_home_path: str = "/builder/templates"

    # App
    app_name: str = "funnel-builder-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def uses_placeholder_supabase(self) -> bool:
        """True when Supabase is not configured; edge enforcement is then disabled."""
        return not self.supabase_url or PLACEHOLDER_SUPABASE_MARKER in self.supabase_url

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_protected_prefixes(self) -> List[str]:
        return [p.strip() for p in self.protected_path_prefixes.split(",") if p.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
