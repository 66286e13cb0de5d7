"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Check if .env file exists and is readable
_env_file = None
try:
    env_path = Path(".env")
    if env_path.exists() and os.access(env_path, os.R_OK):
        _env_file = ".env"
except (OSError, PermissionError):
    # If we can't access .env, continue without it
    pass


class Settings(BaseSettings):
    """All configuration for the activity verification pipeline.

    Values are loaded from environment variables or a .env file.
    The threshold defaults reproduce the reference scenarios exactly;
    change them only together with the review guidelines.
    """

    # Application
    app_name: str = "activity-verifier"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./data/activity_verifier.db"

    # Confidence scorer
    score_base_min: float = 40.0
    score_base_max: float = 80.0  # exclusive
    gps_bonus: int = 15
    biometric_divisor: float = 5.0
    max_confidence_score: int = 99
    scorer_seed: Optional[int] = None  # fixed seed → reproducible base scores

    # Auto-classification (lower bound inclusive)
    auto_verify_threshold: int = 85  # score >= 85 → verified
    review_threshold: int = 60       # 60 <= score < 85 → stays pending
    auto_reject_threshold: int = 40  # score < 40 → rejected, else under_review

    # Appeals
    appeal_confidence_threshold: int = 50  # confidence < 50 → appealable
    rescore_on_appeal_evidence: bool = False

    # Fraud signals
    fraud_confidence_threshold: int = 50
    fraud_biometric_threshold: int = 60

    model_config = {
        "env_file": _env_file,
        "env_file_encoding": "utf-8",
        "env_file_ignore_empty": True,
    }
