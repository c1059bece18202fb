from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./ticketdesk.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # JWT Authentication (shared with the identity provider)
    SECRET_KEY: str

    # Application
    APP_NAME: str = "TicketDesk API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Tenancy
    ADMIN_SUBDOMAIN: str = "admin"
    MAIN_SITE_SUBDOMAINS: str = "www"
    DEV_HOSTS: str = "localhost,127.0.0.1"
    PLATFORM_ADMIN_EMAILS: str = ""
    DEFAULT_PRIMARY_COLOR: str = "#2563EB"

    # Query limits
    TICKET_LIST_LIMIT: int = 100
    DASHBOARD_TICKET_LIMIT: int = 1000
    COMMENT_LIST_LIMIT: int = 100
    ADMIN_TICKET_LIMIT: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @staticmethod
    def _split(value: str) -> list[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        return self._split(self.CORS_ORIGINS)

    @property
    def main_site_subdomains(self) -> set[str]:
        """Subdomains that mean "main site" rather than a tenant"""
        return {key.lower() for key in self._split(self.MAIN_SITE_SUBDOMAINS)}

    @property
    def dev_hosts(self) -> set[str]:
        """Hostnames that never carry a tenant label (local development)"""
        return {host.lower() for host in self._split(self.DEV_HOSTS)}

    @property
    def platform_admin_emails(self) -> set[str]:
        """Principals allowed on the cross-tenant administrative surface"""
        return {email.lower() for email in self._split(self.PLATFORM_ADMIN_EMAILS)}


# Global settings instance
settings = Settings()
