"""Settings for pgdocstore."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class DocStoreSettings(BaseSettings):
    """pgdocstore configuration settings."""

    # PostgreSQL connection, used only when no connection is injected
    PG_HOST: str = "localhost"
    PG_PORT: str = "5432"
    PG_DBNAME: str = "docstore"
    PG_USER: str = "postgres"
    PG_PASSWORD: str = "postgres"

    # Document store
    DOCSTORE_TABLE_PREFIX: str = "em_ds_"
    DOCSTORE_DOC_ID_SCHEMA: str = "UUID NOT NULL"
    DOCSTORE_TRANSACTIONAL: bool = True
    DOCSTORE_USE_METADATA_COLUMNS: bool = False
    # Rows fetched per round trip by server-side cursors
    DOCSTORE_CURSOR_ITERSIZE: int = 2000

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = DocStoreSettings()
