from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./menu.db"
    log_level: str = "INFO"

    # Storage
    storage_backend: str = "sql"  # sql | memory
    snapshot_path: str | None = None  # memory backend only
    max_record_size: int = 1024
    seed_menu: bool = False

    # Observability
    otlp_endpoint: str | None = None

    model_config = {"env_file": ".env"}


settings = Settings()
