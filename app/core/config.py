from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings.
    """
    model_config = SettingsConfigDict(env_prefix="TRACE_INSPECTOR_", env_file=".env", extra="ignore")

    # Service Info
    service_name: str = "trace-inspector"
    environment: str = "local"
    log_level: str = "INFO"
    app_version: str = "unknown"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Trace store
    store_backend: Literal["memory", "jsonl"] = "jsonl"
    traces_path: str = "execution_logs.jsonl"
    collection_name: str = "ai_inference_engine_execution_logs"

    # Query defaults
    default_sort_field: str = "start_time"
    default_page_size: int = 20
    steps_page_size: int = 50

settings = Settings()
