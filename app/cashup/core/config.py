from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "CASHUP"
    DATABASE_URL: str = "sqlite+pysqlite:///./cashup.db"
    LOG_LEVEL: str = "INFO"
    DENOMINATION_IDS: list[str] = ["100", "50", "20", "10", "5", "2", "1", "0.50", "0.20", "0.10", "0.05"]
    RECORDS_MAX_ROWS: int = 500

settings = Settings()
