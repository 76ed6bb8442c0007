"""Application settings pulled from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Terrain
    world_size: float = Field(default=100.0, description="World-space edge length of the terrain")
    default_divisions: int = Field(default=20, description="Grid divisions for new sessions")
    max_divisions: int = Field(default=100, description="Largest allowed grid division count")
    resolution_multiplier: int = Field(default=4, description="Render vertices per grid cell")
    max_resolution_multiplier: int = Field(default=16, description="Largest allowed resolution multiplier")

    # Brushes
    default_strength: float = Field(default=0.5, description="Brush strength for new sessions")
    strength_scale: float = Field(default=2.0, description="Factor applied to kernel * strength")
    thumbnail_resolution: int = Field(default=256, description="Brush thumbnail edge in pixels")

    # Preview
    preview_height_offset: float = Field(default=0.16, description="Ghost lift above the terrain")
    raise_color: str = Field(default="#4ade80", description="Ghost color when raising")
    lower_color: str = Field(default="#f87171", description="Ghost color when lowering")

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    max_sessions: int = Field(default=256, description="Open sessions the API keeps at once")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    class Config:
        env_prefix = "TERRAIN_SCULPT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
