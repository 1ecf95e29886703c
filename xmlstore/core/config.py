from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "document.xslt"


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./xmlstore.db"
    sql_echo: bool = False
    create_schema_on_startup: bool = True

    # Шаблон XSLT для рендеринга документов в HTML
    transform_template_path: str = str(DEFAULT_TEMPLATE_PATH)
    cache_transform_template: bool = True

    # Поведение поиска и изменения XML
    search_fail_fast: bool = False
    reject_ambiguous_xpath: bool = False
    parse_cache_size: int = 256
    validate_content_on_create: bool = True

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "XMLSTORE_", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Настройки по умолчанию из окружения"""
    return Settings()
