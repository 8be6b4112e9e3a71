"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Generation
    default_width: int = Field(default=800, ge=1, description="Default image width")
    default_height: int = Field(default=600, ge=1, description="Default image height")
    default_npoints: int = Field(default=64, ge=0, description="Default number of seed points")
    max_image_size: int = Field(default=4096, ge=1, description="Maximum image width or height")
    render_workers: int = Field(
        default=4, ge=1, description="Worker processes used to rasterise row bands"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
