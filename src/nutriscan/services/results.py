"""JSON payloads describing the current view."""

from nutriscan.domain.analysis import FoodAnalysis, health_band, macro_split
from nutriscan.domain.view import Analyzing, Capturing, Error, Results, View
from nutriscan.services.analysis import integration_code

NOT_FOOD_MESSAGE = (
    "We couldn't identify food in this image. Try another photo of a meal."
)


def build_view_payload(view: View, model: str) -> dict[str, object]:
    """Return a JSON-ready description of ``view``."""
    payload: dict[str, object] = {"state": view.state.value}
    if isinstance(view, Capturing):
        payload["device_error"] = view.device_error
        payload["upload_fallback"] = view.device_error is not None
    elif isinstance(view, Analyzing):
        payload["mime_type"] = view.image.mime_type
    elif isinstance(view, Error):
        payload["message"] = view.message
    elif isinstance(view, Results):
        payload["image"] = view.scan.image.data_url
        payload["result"] = summarize_analysis(view.scan.analysis)
        payload["show_api"] = view.show_api
        if view.show_api:
            payload["api"] = {
                "json": view.scan.analysis.model_dump(mode="json"),
                "integration_code": integration_code(model),
            }
    return payload


def summarize_analysis(analysis: FoodAnalysis) -> dict[str, object]:
    """Summarize an analysis for display.

    Nutrition fields are only read when ``is_food`` is true.
    """
    if not analysis.is_food:
        return {
            "is_food": False,
            "food_name": analysis.food_name,
            "short_description": analysis.short_description,
            "message": NOT_FOOD_MESSAGE,
        }
    split = macro_split(analysis.macronutrients)
    return {
        "is_food": True,
        "food_name": analysis.food_name,
        "serving_size_estimate": analysis.serving_size_estimate,
        "calories_kcal": analysis.calories_kcal,
        "confidence": analysis.confidence,
        "health_score": analysis.health_score,
        "health_band": health_band(analysis.health_score),
        "short_description": analysis.short_description,
        "macronutrients": analysis.macronutrients.model_dump(),
        "macro_split": split.model_dump(),
        "micronutrients": analysis.micronutrients.model_dump(),
        "alternatives": analysis.alternatives or [],
    }
