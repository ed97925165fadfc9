"""
Pharmacy First Pathways — Configuration
=======================================
Centralised settings for logging, pathway content, the remote image
classifier and UI motion timing. Loads overrides from the project-level
.env file and the process environment.
"""
import math
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ── Paths ───────────────────────────────────────────────────────────────
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent
DEFAULT_PATHWAY_DIR = PACKAGE_DIR / "data" / "pathways"

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

# ── Remote classifier defaults ──────────────────────────────────────────
DEFAULT_BINARY_ENDPOINT = "https://pytorch-binary-screening-97937849866.us-central1.run.app/predict"
DEFAULT_MULTICLASS_ENDPOINT = "https://pytorch-multiclass-diagnostic-97937849866.us-central1.run.app/predict"

# ── Motion base timings (ms); scaled by motion_scale ────────────────────
_SCALED_MOTION_MS = {
    "delayStep": 40,
    "delayStepSm": 30,
    "durationIn": 200,
    "durationOut": 150,
    "durationItemIn": 200,
    "durationItemFade": 180,
}
_FIXED_MOTION_PX = {
    "slideY": 16,
    "slideItemY": 6,
    "fromRightX": 64,
}


class Settings(BaseSettings):
    # Empty variables count as unset, so a blank PUBLIC_* name falls through
    # to the server-side name and then to the built-in default.
    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True, env_ignore_empty=True)

    app_name: str = "Pharmacy First Pathways API"
    app_version: str = "1.0.0"

    log_level: str = "INFO"
    log_file: Optional[str] = None

    pathway_data_dir: Path = DEFAULT_PATHWAY_DIR

    # PUBLIC_* wins over the server-side name when both are set and non-empty
    binary_endpoint: str = Field(
        default=DEFAULT_BINARY_ENDPOINT,
        validation_alias=AliasChoices("PUBLIC_BINARY_ENDPOINT", "BINARY_ENDPOINT", "binary_endpoint"),
    )
    multiclass_endpoint: str = Field(
        default=DEFAULT_MULTICLASS_ENDPOINT,
        validation_alias=AliasChoices("PUBLIC_MULTICLASS_ENDPOINT", "MULTICLASS_ENDPOINT", "multiclass_endpoint"),
    )
    inference_timeout_seconds: float = 30.0

    motion_scale: float = Field(
        default=1.0,
        validation_alias=AliasChoices("PUBLIC_MOTION_SCALE", "motion_scale"),
    )

    @field_validator("binary_endpoint", "multiclass_endpoint", mode="before")
    @classmethod
    def _blank_endpoint_uses_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            if info.field_name == "binary_endpoint":
                return DEFAULT_BINARY_ENDPOINT
            return DEFAULT_MULTICLASS_ENDPOINT
        return value

    @field_validator("motion_scale", mode="before")
    @classmethod
    def _sanitise_motion_scale(cls, value: Any) -> float:
        try:
            scale = float(value)
        except (TypeError, ValueError):
            return 1.0
        if not math.isfinite(scale) or scale <= 0:
            return 1.0
        return scale

    def endpoint_for(self, stage: str) -> str:
        """Remote classifier URL for 'binary' or 'multiclass'."""
        return self.multiclass_endpoint if stage == "multiclass" else self.binary_endpoint

    def motion_timings(self) -> Dict[str, float]:
        """UI animation timings with durations scaled by motion_scale."""
        timings: Dict[str, float] = {
            name: base * self.motion_scale for name, base in _SCALED_MOTION_MS.items()
        }
        timings.update(_FIXED_MOTION_PX)
        return timings


settings = Settings()
