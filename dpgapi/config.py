"""Configuration management for the DPG API sync."""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# These DPGs were assessed through the early grade reading process and have
# no screening data.
EARLY_GRADE_READING = [
    "african-storybook",
    "antura-and-the-letters",
    "book-dash",
    "feed-the-monster",
    "gdl-radio",
    "global-digital-library",
    "h5p",
    "storyweaver",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Local corpora
    nominees_folder: Path = Field(default=Path("nominees"))
    screening_folder: Path = Field(default=Path("screening"))
    excluded_annotation_ids: List[str] = Field(
        default_factory=lambda: list(EARLY_GRADE_READING),
        description="DPG ids that never receive screening data",
    )

    # Publication repository
    api_repo_url: str = Field(default="https://github.com/unicef/publicgoods-api.git")
    api_repo_path: Path = Field(default=Path("../publicgoods-api"))
    api_folder: str = Field(default="docs")
    remote: str = Field(default="origin")
    branch: str = Field(default="main")
    ssl_verify: bool = Field(default=True)

    # Commit identity
    commit_author_name: str = Field(default="Victor Grau Serrat")
    commit_author_email: str = Field(default="lacabra@users.noreply.github.com")
    commit_message: str = Field(default="Update nominee and DPG API data")

    # Trigger
    changed_files_path: Path = Field(
        default_factory=lambda: Path.home() / "files.json"
    )
    trigger_patterns: List[str] = Field(
        default_factory=lambda: [r"nominees/.*\.json", r"screening/.*\.json"]
    )

    # Runtime
    write_workers: int = Field(default=4, ge=1)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False, description="Emit logs as JSON lines")
    dry_run: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="DPGAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def output_dir(self) -> Path:
        """Folder inside the API repository that receives the published data."""
        return self.api_repo_path / self.api_folder


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
