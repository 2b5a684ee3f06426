# services/api/settings.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
from typing import List
from pathlib import Path

class Settings(BaseSettings):
    # Student source (host application data)
    # JSON file holding the ordered student list; loaded once at startup.
    student_source_path: str = "data/students.json"

    # Local artifacts: locations that are not http(s) URLs are resolved
    # relative to this directory.
    artifact_root: str = "data/artifacts"

    # Artifact fetching
    artifact_fetch_timeout: float = 30.0
    artifact_cache_ttl: int = 300
    artifact_cache_size: int = 32

    # Viewer
    zoom_step: float = 0.2
    zoom_min: float = 0.2
    zoom_max: float = 4.0
    # Base rasterization scale for PDF pages (2.0 ≈ 144 DPI); multiplied by zoom
    page_render_scale: float = 1.5

    # Review
    approval_note: str = Field(
        default="Dokumen valid.",
        description="Note written on a document when it is approved",
    )

    # Console sessions (one per operator screen)
    session_ttl_seconds: int = 8 * 60 * 60
    max_sessions: int = 200

    # CORS settings
    allowed_origins: str = "http://localhost:3000,http://localhost:5173,http://localhost:8000"

    log_level: str = "INFO"

    model_config = ConfigDict(
        # Always load .env from the same folder as this settings.py
        env_file=str(Path(__file__).resolve().parent / ".env"),
        extra="ignore",
    )

    def get_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


_settings_instance = None

def get_settings() -> Settings:
    """Singleton pattern for settings."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
