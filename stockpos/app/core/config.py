from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./stockpos.db"

    # CORS origins for the web client
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    LOG_LEVEL: str = "INFO"

    # Invoice rendering
    INVOICE_RENDERER: str = "direct"  # "direct" or "snapshot"
    INVOICE_PAGE_WIDTH_PX: int = 800
    INVOICE_RASTER_SCALE: int = 2
    INVOICE_OUTPUT_DIR: str = "./invoices"

    # Redis / Celery
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # SMTP
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    NOTIFICATION_ENABLED: bool = False
    NOTIFICATION_RECIPIENT: str = ""

    # File storage
    FILE_STORAGE_PATH: str = "/tmp/stockpos-files"
    FILE_STORAGE_BACKEND: str = "local"  # only "local" is supported


settings = Settings()
