# app/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import Optional, List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)

    # Application Settings
    APP_NAME: str = "Phone OTP Auth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True
    API_PREFIX: str = "/api"

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./otp_auth.db")
    DATABASE_TIMEOUT_SECONDS: int = 5

    # Security Settings
    SECRET_KEY: str = Field(default="change-me-in-prod", alias="JWT_SECRET_KEY")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # CORS Settings
    ALLOWED_ORIGINS: str = os.environ.get("ALLOWED_ORIGINS", "*")

    # OTP Settings
    OTP_LENGTH: int = 6
    OTP_TTL_MINUTES: int = 5
    OTP_KIND_LOGIN: str = "login"
    OTP_HASH_ROUNDS: int = 10
    OTP_REQUEST_LIMIT: int = 3
    OTP_REQUEST_WINDOW_SECONDS: int = 60
    # When false, suspended accounts get the same 401 as a wrong code on verify
    OTP_VERIFY_REVEALS_SUSPENDED: bool = False

    # SMS Settings ("twilio" or "log"; "log" writes codes to the log and needs DEBUG)
    SMS_BACKEND: str = "twilio"
    TWILIO_ACCOUNT_SID: str = os.environ.get("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN: str = os.environ.get("TWILIO_AUTH_TOKEN", "")
    TWILIO_PHONE_NUMBER: str = os.environ.get("TWILIO_PHONE_NUMBER", "")
    TWILIO_TIMEOUT_SECONDS: int = 10

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rate Limiting
    REDIS_URL: Optional[str] = os.environ.get("REDIS_URL", None)

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def twilio_configured(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_PHONE_NUMBER)

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
