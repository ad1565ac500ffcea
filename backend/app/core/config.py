import secrets
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "SEO-Flow"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str = secrets.token_urlsafe(32)
    # 60 minutes * 24 hours * 8 days = 8 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./seoflow.db"

    # Any OpenAI-compatible chat completions endpoint. Defaults to Gemini's.
    LLM_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    # json_schema: send the schema descriptor as response_format
    # json_object: JSON mode, schema only in the system prompt
    # prompt: schema only in the system prompt
    LLM_RESPONSE_FORMAT: Literal["json_schema", "json_object", "prompt"] = "json_schema"
    LLM_TIMEOUT_SECONDS: float = 120.0

    MODEL_DEFAULT: str = "gemini-2.5-flash"
    MODEL_OUTREACH: str = ""

    DASHBOARD_RECENT_LIMIT: int = 3
    DASHBOARD_PROJECTS_LIMIT: int = 5


settings = Settings()  # type: ignore
