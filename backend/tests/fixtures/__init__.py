"""Fixture loading helpers for offline tests."""

import json
from pathlib import Path
from typing import Any, Optional

from app.schemas.activity import ActivityCreate, EvidenceRecordCreate

FIXTURES_DIR = Path(__file__).resolve().parent


def load_fixture(name: str) -> Any:
    """Load a JSON fixture file by name."""
    path = FIXTURES_DIR / name
    if not path.exists():
        raise FileNotFoundError(f"Fixture not found: {path}")
    return json.loads(path.read_text())


def scenario_payload(name: str, **overrides) -> ActivityCreate:
    """Activity submission from ``scenarios.json`` with top-level overrides."""
    data = dict(load_fixture("scenarios.json")[name])
    data.update(overrides)
    return ActivityCreate.model_validate(data)


def evidence(gps: bool = True, biometric: Optional[float] = 95.0, name: str = "doc.pdf") -> EvidenceRecordCreate:
    return EvidenceRecordCreate(
        filename=name,
        gps_verified=gps,
        biometric_match_score=biometric if biometric is not None else 0.0,
    )
