"""Runtime settings, read from ``API_COLLECTION_*`` environment variables or ``.env``."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    default_name: str = "API Collection"
    # Postman variable, resolved by the client at request time
    default_base_url: str = "{{baseUrl}}"
    indent: int = 2
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="API_COLLECTION_", env_file=".env", extra="ignore")


settings = Settings()
