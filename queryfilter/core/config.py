from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    APP_ENV: str = "local"
    APP_NAME: str = "queryfilter"

    DATABASE_URL: str = "sqlite+pysqlite:///./queryfilter.db"

    # Key of the mapped column `info` dict holding the capability tag.
    FILTER_TAG_KEY: str = "filter"
    FILTER_DEFAULT_PAGE_SIZE: int = 10
    FILTER_MAX_PAGE_SIZE: int = 100
    FILTER_DEFAULT_ORDER_BY: str = "id"
    FILTER_DEFAULT_ORDER_DIRECTION: str = "desc"  # desc | asc


settings = Settings()
