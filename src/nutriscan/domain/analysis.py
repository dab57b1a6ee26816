"""Models for food analysis results."""

import math

from pydantic import BaseModel, ConfigDict


class MacroNutrients(BaseModel):
    """Macronutrients in grams."""

    model_config = ConfigDict(allow_inf_nan=False)

    protein_g: float
    carbs_g: float
    fat_g: float


class MicroNutrients(BaseModel):
    """Micronutrients reported alongside macros."""

    model_config = ConfigDict(allow_inf_nan=False)

    sugar_g: float
    fiber_g: float
    sodium_mg: float | None = None


class MacroSplit(BaseModel):
    """Share of each macronutrient in whole percents."""

    protein_pct: int
    carbs_pct: int
    fat_pct: int
    total_g: float


class FoodAnalysis(BaseModel):
    """Structured nutritional estimate for one image.

    Finite values are accepted as the model returns them. Ranges such as
    ``health_score`` in [0, 100] are requested in the prompt but never
    enforced here, so consumers must not rely on them. When ``is_food``
    is false the nutrition fields carry whatever defaults the model chose.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    is_food: bool
    food_name: str
    serving_size_estimate: str | None = None
    calories_kcal: float
    macronutrients: MacroNutrients
    micronutrients: MicroNutrients
    health_score: float
    short_description: str
    confidence: float | None = None
    alternatives: list[str] | None = None


def macro_split(macros: MacroNutrients) -> MacroSplit:
    """Return protein/carbs/fat percentages of their combined weight."""
    total = macros.protein_g + macros.carbs_g + macros.fat_g

    def _percent(value: float) -> int:
        if total <= 0:
            return 0
        return _round_half_up(value / total * 100)

    return MacroSplit(
        protein_pct=_percent(macros.protein_g),
        carbs_pct=_percent(macros.carbs_g),
        fat_pct=_percent(macros.fat_g),
        total_g=round(total, 2),
    )


def health_band(score: float) -> str:
    """Bucket a health score into a display band."""
    if score > 70:
        return "good"
    if score > 40:
        return "moderate"
    return "poor"


def _round_half_up(value: float) -> int:
    # round() uses banker's rounding; 2.5% should read as 3%.
    return math.floor(value + 0.5)
