from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./salon.db"
    debug: bool = False
    log_level: str = "INFO"
    quote_validity_days: int = 30
    finalize_attempts: int = 3

    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
