"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from functools import lru_cache
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = Field(default="development")

    # Application
    app_name: str = "SiteAudit"
    app_version: str = "0.1.0"
    schema_version: str = Field(default="1.0")

    # Fetch layer
    user_agent: str = Field(
        default="Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36 SiteAudit/0.1"
    )
    fetch_timeout: float = Field(default=15.0, gt=0)
    min_html_bytes: int = Field(default=1000, ge=0)
    render_timeout: float = Field(default=30.0, gt=0)
    resource_drain_timeout: float = Field(default=5.0, gt=0)

    # Sitemap / robots probes
    sitemap_timeout: float = Field(default=8.0, gt=0)
    robots_timeout: float = Field(default=4.0, gt=0)

    # Keyword extraction
    keyword_limit: int = Field(default=20, ge=1, le=50)
    keyword_min_length: int = Field(default=4, ge=1)

    # Traffic banding thresholds (hand-tuned heuristics)
    traffic_high_pages: int = Field(default=1000)
    traffic_high_blog_links: int = Field(default=100)
    traffic_mid_pages: int = Field(default=200)
    traffic_mid_blog_links: int = Field(default=20)
    traffic_high_resources: int = Field(default=1000)

    # Deep audits
    lighthouse_binary: str = Field(default="lighthouse")
    lighthouse_timeout: float = Field(default=90.0, gt=0)
    axe_script_path: Optional[str] = Field(default=None, description="Path to axe.min.js")
    axe_timeout: float = Field(default=30.0, gt=0)

    # Analysis defaults
    run_deep_audit: bool = Field(default=False)
    collect_resources: bool = Field(default=True)
    analysis_timeout: float = Field(default=180.0, gt=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @model_validator(mode="after")
    def validate_traffic_thresholds(self):
        """High-traffic thresholds must sit above the mid-traffic ones"""
        if self.traffic_high_pages < self.traffic_mid_pages:
            raise ValueError("traffic_high_pages must be >= traffic_mid_pages")
        if self.traffic_high_blog_links < self.traffic_mid_blog_links:
            raise ValueError("traffic_high_blog_links must be >= traffic_mid_blog_links")
        return self

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
