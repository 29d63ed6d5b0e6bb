from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal


class Settings(BaseSettings):
    APP_NAME: str = "promptgen"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # OpenAI-compatible completion endpoint
    OPENAI_API_KEY: str = Field(...)
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o"

    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4096
    LLM_TIMEOUT_SECONDS: int = 120
    LLM_RESPONSE_FORMAT: Literal["json_object", "json_schema"] = "json_object"

    # 1 attempt == no retry
    LLM_RETRY_ATTEMPTS: int = 1
    LLM_RETRY_WAIT_SECONDS: int = 1

    # wall-clock budget for one pipeline run at the HTTP layer
    PIPELINE_TIMEOUT_SECONDS: float = 60

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
