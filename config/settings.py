from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Staging
    staging_dir: str = "uploads"
    videos_url_prefix: str = "/videos"
    cleanup_delay_seconds: float = 3600  # 1 hour

    # Frontend bundle
    frontend_dir: str = "frontend"

    # Encoders
    ffmpeg_binary: str = "ffmpeg"
    handbrake_binary: str = "HandBrakeCLI"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=3000, alias="PORT")
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

try:
    settings = Settings()
except Exception:
    settings = Settings(_env_file=None)
