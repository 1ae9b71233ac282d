from pydantic_settings import BaseSettings, SettingsConfigDict
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEMBER_SEARCH_", env_file=".env", extra="ignore")
    DATABASE_URL: str = "sqlite:///./member_search.db"
    SQL_ECHO: bool = False
    # pool sizing applies to server databases only; SQLite keeps its own pool
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_PRE_PING: bool = True

    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    LOG_LEVEL: str = "INFO"
settings = Settings()
