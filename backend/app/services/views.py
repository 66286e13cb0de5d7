"""ORM → response schema conversion shared by the services."""

from app.config import Settings
from app.domain.scoring import confidence_band
from app.models.activity import ActivityModel
from app.models.appeal import AppealModel
from app.schemas.activity import Activity
from app.schemas.appeal import Appeal


def activity_view(activity: ActivityModel, settings: Settings) -> Activity:
    view = Activity.model_validate(activity)
    view.confidence_band = confidence_band(
        view.verification.ai_confidence_score,
        high=settings.auto_verify_threshold,
        medium=settings.review_threshold,
    )
    return view


def appeal_view(appeal: AppealModel) -> Appeal:
    return Appeal.model_validate(appeal)
