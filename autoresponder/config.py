from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./autoresponder.db"
    debug: bool = False
    log_level: str = "INFO"
    cors_allow_origins: str = "*"

    jwt_secret: str = "change-me-in-production-please-32b"
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1/chat/completions"
    completion_timeout_seconds: float = 15.0
    completion_max_tokens: int = 500
    completion_temperature: float = 0.7

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
