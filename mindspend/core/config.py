from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "MindSpend"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Persistence: "dynamo" for AWS, "memory" for local development
    STORAGE_BACKEND: str = Field(default="dynamo")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TABLE_USERS: str = Field(default="mindspend-users")
    DYNAMO_TABLE_PROFILES: str = Field(default="mindspend-profiles")
    DYNAMO_TABLE_EXPENSES: str = Field(default="mindspend-expenses")
    DYNAMO_TABLE_BUDGETS: str = Field(default="mindspend-budgets")
    DYNAMO_TABLE_RECURRING: str = Field(default="mindspend-recurring-expenses")
    DYNAMO_TABLE_GOALS: str = Field(default="mindspend-savings-goals")
    DYNAMO_TABLE_NOTIFICATIONS: str = Field(default="mindspend-notifications")
    DYNAMO_TABLE_PUSH: str = Field(default="mindspend-push-subscriptions")

    # AWS S3 (receipts and avatars share one bucket)
    S3_BUCKET_NAME: str = Field(default="mindspend-receipts")
    S3_REGION: str = Field(default="eu-west-1")
    RECEIPT_MAX_BYTES: int = 5 * 1024 * 1024
    AVATAR_MAX_BYTES: int = 2 * 1024 * 1024

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Hosted chat-completion gateway (OpenAI compatible)
    AI_GATEWAY_URL: str = Field(default="https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_API_KEY: str = Field(default="")
    AI_MODEL: str = Field(default="google/gemini-2.5-flash")
    AI_TIMEOUT_SECONDS: float = 30.0

    # Budget defaults
    DEFAULT_MONTHLY_BUDGET: float = 500.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
