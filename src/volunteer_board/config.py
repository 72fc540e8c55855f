"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PLACEHOLDER_URL = "YOUR_SUPABASE_URL"
PLACEHOLDER_ANON_KEY = "YOUR_SUPABASE_ANON_KEY"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    admin_password: str = ""
    request_timeout: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        frozen=True,
    )

    @property
    def setup_required(self) -> bool:
        """Return True while the store or admin secret is still unset."""
        url = self.supabase_url.strip()
        key = self.supabase_anon_key.strip()
        if not url or url == PLACEHOLDER_URL:
            return True
        if not key or key == PLACEHOLDER_ANON_KEY:
            return True
        return not self.admin_password


SCHEMA_SQL = """-- records table
CREATE TABLE records (
  id BIGSERIAL PRIMARY KEY,
  created_at TIMESTAMP DEFAULT NOW(),
  date DATE,
  name TEXT,
  organization TEXT,
  hours REAL,
  location TEXT,
  participants TEXT,
  description TEXT,
  author_name TEXT,
  author_password TEXT,
  photos TEXT[]
);

-- comments table
CREATE TABLE comments (
  id BIGSERIAL PRIMARY KEY,
  created_at TIMESTAMP DEFAULT NOW(),
  record_id BIGINT REFERENCES records(id),
  nickname TEXT,
  password TEXT,
  content TEXT,
  timestamp TEXT
);
"""
