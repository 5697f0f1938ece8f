from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import os
from pathlib import Path


class Settings(BaseSettings):
    """Application settings - reads from environment variables"""

    # Supabase
    supabase_project_id: str = ""
    supabase_anon_key: str = ""
    server_function_name: str = "make-server"

    # Local storage (browser-storage equivalent)
    storage_dir: Path = Path(".sportsbuddy")

    # Timeouts (seconds)
    request_timeout: float = 5.0
    session_lookup_timeout: float = 2.0
    session_restore_timeout: float = 3.0
    login_timeout: float = 5.0

    # Local web adapter
    web_host: str = "127.0.0.1"
    web_port: int = 8080

    # Environment
    env: str = "development"
    debug: bool = False

    @field_validator('server_function_name', mode='before')
    @classmethod
    def strip_slashes(cls, v):
        if isinstance(v, str):
            return v.strip("/")
        return v

    @property
    def supabase_url(self) -> str:
        return f"https://{self.supabase_project_id}.supabase.co"

    @property
    def server_base_url(self) -> str:
        """Base URL of the edge function that serves the app's REST endpoints"""
        return f"{self.supabase_url}/functions/v1/{self.server_function_name}"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # SUPABASE_PROJECT_ID == supabase_project_id
    )


# Create settings instance
settings = Settings()

if os.getenv("DEBUG", "").lower() == "true":
    print("Settings loaded:")
    print(f"  SUPABASE_PROJECT_ID: {'set' if settings.supabase_project_id else 'MISSING'}")
    print(f"  SUPABASE_ANON_KEY: {'set' if settings.supabase_anon_key else 'MISSING'}")
    print(f"  STORAGE_DIR: {settings.storage_dir}")
