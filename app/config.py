import os
from enum import Enum
from typing import List, Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class WritePolicy(str, Enum):
    """What an operation does when its write-back to the store fails."""
    FAIL = "fail"
    BEST_EFFORT = "best_effort"


class Settings(BaseSettings):
    # Supabase configuration
    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = os.getenv("SUPABASE_ANON_KEY")
    PLACE_INFO_TABLE: str = "place-info"
    USER_TABLE: str = "user"

    # Kakao OAuth
    KAKAO_RESTAPI_KEY: str = os.getenv("KAKAO_RESTAPI_KEY", "")
    KAKAO_CLIENT_SECRET: str = os.getenv("KAKAO_CLIENT_SECRET", "")
    KAKAO_TOKEN_URL: str = "https://kauth.kakao.com/oauth/token"

    # Place info upstream and cache policy
    PLACE_INFO_API_URL: str = os.getenv(
        "PLACE_INFO_API_URL", "https://hallowed-port-432100-s2.uw.r.appspot.com")
    PLACE_INFO_FRESHNESS_HOURS: float = 24
    PLACE_INFO_WRITE_POLICY: WritePolicy = WritePolicy.FAIL
    PROFILE_WRITE_POLICY: WritePolicy = WritePolicy.BEST_EFFORT
    PLACE_INFO_COALESCE_REFRESHES: bool = False
    HTTP_TIMEOUT_SECONDS: float = 30.0

    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", 8000))
    API_RELOAD: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def get_settings() -> Settings:
    """Settings dependency, overridable in tests"""
    return settings
