"""Application configuration and settings."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables, optionally overlaid by YAML."""

    # Worker
    worker_path: Path = Path("client3D/client3D")

    # Directories
    source_dir: Path = Path("images/original-images")
    temp_dir: Path = Path("images/temp-images")
    generated_dir: Path = Path("GeneratedModels")
    pipelines_dir: Path = Path("pipelines")
    pipeline_state_file: Path = Path(".atlasgen/active_pipeline.json")

    # Output polling
    poll_interval: float = 0.5
    stable_wait_timeout: Optional[float] = None  # per wait, then refresh and retry
    refresh_interval: float = 1.0
    output_timeout: Optional[float] = None  # overall deadline, None waits forever

    # Validation / import
    validation_retry_interval: float = 1.0
    max_validation_attempts: Optional[int] = None  # None retries forever
    import_retry_interval: float = 1.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    log_max_size_mb: int = 10
    log_backup_count: int = 3

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    class Config:
        env_prefix = "ATLASGEN_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        """Load settings from a YAML file; environment still fills the gaps."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Settings":
        """Load settings from the first YAML file found, falling back to env/defaults."""
        search_paths = [
            path,
            os.environ.get("ATLASGEN_CONFIG"),
            os.path.expanduser("~/.atlasgen/config.yaml"),
            "/etc/atlasgen/config.yaml",
        ]
        for p in search_paths:
            if p and os.path.isfile(p):
                return cls.from_yaml(p)
        return cls()

    def ensure_dirs(self):
        """Create the working directories used by conversion jobs."""
        for directory in (self.source_dir, self.temp_dir, self.generated_dir, self.pipelines_dir):
            directory.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
