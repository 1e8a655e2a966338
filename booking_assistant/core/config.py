# booking_assistant/core/config.py

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # MongoDB settings
    MONGODB_URI: str = Field(default="mongodb://localhost:27017", env="MONGODB_URI")
    MONGODB_DB: str = Field(default="booking_assistant", env="MONGODB_DB")

    # OpenAI settings (empty key disables the external AI)
    OPENAI_API_KEY: str = Field(default="", env="OPENAI_API_KEY")
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1", env="OPENAI_BASE_URL")

    # LLM settings
    LLM_MODEL: str = Field(default="gpt-4o-mini", env="LLM_MODEL")
    LLM_TEMPERATURE: float = Field(default=0.3, env="LLM_TEMPERATURE")
    LLM_MAX_TOKENS: int = Field(default=512, env="LLM_MAX_TOKENS")
    LLM_TIMEOUT_SECONDS: float = Field(default=10.0, env="LLM_TIMEOUT_SECONDS")
    AI_CONTEXT_TURNS: int = Field(default=10, env="AI_CONTEXT_TURNS")

    # Session settings
    SESSION_BACKEND: str = Field(default="memory", env="SESSION_BACKEND")  # memory | mongo
    SESSION_HISTORY_LIMIT: int = Field(default=20, env="SESSION_HISTORY_LIMIT")
    SESSION_IDLE_MINUTES: int = Field(default=30, env="SESSION_IDLE_MINUTES")
    SESSION_SWEEP_INTERVAL_SECONDS: int = Field(default=300, env="SESSION_SWEEP_INTERVAL_SECONDS")
    SESSION_TTL_HOURS: int = Field(default=24, env="SESSION_TTL_HOURS")

    # NLP tunables
    SUPPRESS_SPECIALIZATION_WITH_APPOINTMENT: bool = Field(
        default=False, env="SUPPRESS_SPECIALIZATION_WITH_APPOINTMENT"
    )
    DOCTOR_RESULT_LIMIT: int = Field(default=5, env="DOCTOR_RESULT_LIMIT")

    # Auth/JWT settings
    SECRET_KEY: str = Field(default="change-me", env="SECRET_KEY")
    JWT_ALGORITHM: str = Field(default="HS256", env="JWT_ALGORITHM")

settings = Settings()
