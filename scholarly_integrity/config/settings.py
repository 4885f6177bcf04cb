"""Engine settings and environment configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")


@dataclass
class Settings:
    """Engine settings loaded from environment variables."""

    # Risk classification
    support_score_floor: float = float(os.getenv("INTEGRITY_SUPPORT_SCORE_FLOOR", "0.25"))
    corroboration_floor: float = float(os.getenv("INTEGRITY_CORROBORATION_FLOOR", "0.5"))
    similarity_metric: str = os.getenv("INTEGRITY_SIMILARITY_METRIC", "token_containment")

    # External source lookups
    source_timeout_ms: int = int(os.getenv("INTEGRITY_SOURCE_TIMEOUT_MS", "2000"))

    # Report verdict
    pass_threshold: float = float(os.getenv("INTEGRITY_PASS_THRESHOLD", "0.7"))

    # Verbose workflow logging
    debug: bool = os.getenv("INTEGRITY_DEBUG", "false").lower() == "true"

    def validate(self) -> list[str]:
        """Validate settings are in range."""
        errors = []
        for name in ("support_score_floor", "corroboration_floor", "pass_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name} must be between 0 and 1, got {value}")
        if self.source_timeout_ms <= 0:
            errors.append(f"source_timeout_ms must be positive, got {self.source_timeout_ms}")
        return errors


# Global settings instance
settings = Settings()
