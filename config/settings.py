from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Core
    ENVIRONMENT: str = Field(default="production")
    FIRESTORE_PROJECT_ID: str = Field(default="")
    LOG_LEVEL: str = Field(default="INFO")

    # SMS provider selection: iprogtech | semaphore
    SMS_PROVIDER: str = Field(default="iprogtech")
    SMS_HTTP_TIMEOUT_S: float = Field(default=20.0)

    # iProg Tech (default provider)
    IPROGTECH_API_TOKEN: str = Field(default="")
    IPROGTECH_API_URL: str = Field(default="https://sms.iprogtech.com/api/v1")
    IPROGTECH_SMS_PROVIDER: int = Field(default=0)  # vendor route option, 0 or 1

    # Semaphore (alternative provider)
    SEMAPHORE_API_KEY: str = Field(default="")
    SEMAPHORE_SENDER_NAME: str = Field(default="OSCA")
    SEMAPHORE_API_URL: str = Field(default="https://api.semaphore.co/api/v4/messages")
    SEMAPHORE_ACCOUNT_URL: str = Field(default="https://api.semaphore.co/api/v4/account")


settings = Settings()
