"""Unified settings for cover-upload-api."""

import importlib.metadata
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when not shipped alongside the code."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(project: dict) -> str:
    """Get version from installed package metadata or fallback to pyproject."""
    try:
        return importlib.metadata.version("cover-upload-api")
    except importlib.metadata.PackageNotFoundError:
        return project.get("project", {}).get("version", "0.0.0")


class Settings(BaseSettings):
    """Unified settings for cover-upload-api service."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "cover-upload-api")
    API_VERSION: ClassVar[str] = get_version(PROJECT)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Paths
    DATA_PATH: ClassVar[Path] = BASE_DIR / "data"

    # Storage
    STORAGE_BACKEND: Literal["s3", "local", "memory"] = "s3"
    BUCKET_NAME: str = "bookstore-images-bucket"
    AWS_REGION: str = "us-west-1"
    S3_ENDPOINT_URL: str | None = None
    LOCAL_STORAGE_PATH: Path = DATA_PATH / "objects"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
