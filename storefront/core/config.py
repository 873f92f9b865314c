import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/app.db")).resolve()
        self.upload_dir = Path(os.getenv("UPLOAD_DIR", "uploads")).resolve()
        self.session_token_secret = os.getenv("SESSION_TOKEN_SECRET", "change-me")
        self.session_token_algorithm = os.getenv("SESSION_TOKEN_ALGORITHM", "HS256")
        self.session_token_exp_minutes = self._get_int("SESSION_TOKEN_EXP_MINUTES", default=60 * 24)
        self.verification_token_hours = self._get_int("VERIFICATION_TOKEN_HOURS", default=24)
        self.reset_token_minutes = self._get_int("RESET_TOKEN_MINUTES", default=60)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        self.public_base_url = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
        self.frontend_base_url = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME")
        self.smtp_password = os.getenv("SMTP_PASSWORD")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc
