from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .prompt import DEFAULT_STYLE_GUIDE

class Settings(BaseSettings):

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    service_name: str = "translation-audit-service"
    environment: str = "local"

    # Upstream completion API
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None

    # LLM/audit engine config
    audit_model: str = "gpt-4o-mini"
    audit_prompt_mode: Literal["json", "chat"] = "json"
    audit_temperature: float = 0.2
    audit_timeout_s: Optional[float] = None
    audit_strict_scores: bool = False
    audit_default_style: str = DEFAULT_STYLE_GUIDE

    # Tracing
    tracing_enabled: bool = True
    trace_exporter: Literal["console", "cloud"] = "console"

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
