from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/restaurant"
    database_echo: bool = False
    log_level: str = "INFO"

    # Menu catalog
    seed_menu: bool = True

    # Order lifecycle
    enforce_forward_status_flow: bool = False

    # Back office
    admin_username: str = "admin"
    admin_password: str = "admin123"
    admin_session_secret: str = "replace-this-secret-before-production"
    admin_session_ttl_seconds: int = 60 * 60 * 12
    admin_cookie_name: str = "ph_admin_session"
    admin_cookie_secure: bool = False

    # Observability
    service_name: str = "bistro-api"
    otlp_endpoint: str | None = None

    model_config = {"env_file": ".env"}


settings = Settings()
