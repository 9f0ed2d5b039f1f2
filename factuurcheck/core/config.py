from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("factuurcheck", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")

    # LLM (OpenAI-compatible chat completions)
    llm_base_url: str | None = Field(default=None, alias="LLM_BASE_URL")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")
    llm_model: str = Field("gpt-4o-mini", alias="LLM_MODEL")
    llm_timeout_ms: int = Field(20_000, alias="LLM_TIMEOUT_MS")

    # Azure Document Intelligence
    az_di_endpoint: str | None = Field(default=None, alias="AZ_DI_ENDPOINT")
    az_di_api_key: str | None = Field(default=None, alias="AZ_DI_API_KEY")
    az_di_model: str = Field("prebuilt-read", alias="AZ_DI_MODEL")

    # Rate limiting (Redis URL and token must be set together)
    rate_limit_redis_url: str | None = Field(default=None, alias="RATE_LIMIT_REDIS_URL")
    rate_limit_redis_token: str | None = Field(default=None, alias="RATE_LIMIT_REDIS_TOKEN")
    rate_limit_in_memory: bool = Field(False, alias="RATE_LIMIT_IN_MEMORY")
    rate_limit_requests: int = Field(10, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_ms: int = Field(60_000, alias="RATE_LIMIT_WINDOW_MS")

    # Upload limits
    max_upload_bytes: int = Field(10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    max_text_chars: int = Field(100_000, alias="MAX_TEXT_CHARS")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    # Observability
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _redis_pair(self):
        if bool(self.rate_limit_redis_url) != bool(self.rate_limit_redis_token):
            raise ValueError(
                "RATE_LIMIT_REDIS_URL and RATE_LIMIT_REDIS_TOKEN must be set together"
            )
        return self

    @property
    def redis_configured(self) -> bool:
        return bool(self.rate_limit_redis_url and self.rate_limit_redis_token)

    @property
    def ocr_configured(self) -> bool:
        return bool(self.az_di_endpoint and self.az_di_api_key)

settings = Settings()
