"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env (prefix MENTORQUEST_)."""

    app_name: str = "MentorQuest"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./mentorquest.db"
    sqlite_busy_timeout: float = 30.0

    # Session tokens (HMAC signed)
    secret_key: str = "change-me-in-production-use-env"
    session_max_age_seconds: int = 60 * 60 * 24 * 14  # 14 days

    # Auth cookie
    auth_cookie_name: str = "mq_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # Question of the day batch: runs at HH:MM UTC and picks for the next day
    qotd_scheduler_enabled: bool = True
    qotd_run_hour: int = 23
    qotd_run_minute: int = 58

    # When true, attempted/total topic counters are maintained alongside solved
    track_topic_attempts: bool = False

    leaderboard_max_page_size: int = 100

    class Config:
        env_prefix = "MENTORQUEST_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
