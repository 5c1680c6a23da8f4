"""Personalised health-risk scoring from an overall AQI and a user profile."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..errors import InvalidInputError
from ..utils.numbers import round_half_away_from_zero

LOGGER = logging.getLogger(__name__)

SMOKING_STATUSES = ("never", "former", "current")
ACTIVITY_LEVELS = ("low", "moderate", "high")

RESPIRATORY_KEYWORDS = ("asthma", "copd", "bronchitis", "lung disease")
CARDIOVASCULAR_KEYWORDS = ("heart disease", "hypertension", "cardiovascular disease")

INDEX_SATURATION = 300.0
OBESITY_BMI = 30.0
HIGH_ACTIVITY_AQI = 100.0

# (factor, increment, recommendation)
ADVANCED_AGE = ("advanced age", 0.20, "Limit outdoor exposure during high pollution")
CHILD = ("child sensitivity", 0.15, "Ensure indoor air quality is maintained")
RESPIRATORY = ("respiratory condition", 0.30, "Use prescribed inhalers and avoid outdoor activities")
CARDIOVASCULAR = ("cardiovascular condition", 0.25, "Monitor heart rate and avoid strenuous activities")
ALLERGY = ("allergy sensitivity", 0.10, "Take antihistamines as prescribed")
SMOKING = ("active smoking", 0.20, "Consider quitting smoking and avoid secondhand smoke")
OBESITY = ("obesity", 0.10, "Maintain indoor exercise routine during high pollution")
HIGH_ACTIVITY = ("high-exposure activity", 0.10, "Reduce outdoor exercise intensity")


@dataclass(frozen=True)
class RiskLevel:
    name: str
    threshold: float
    recommendations: Tuple[str, ...]
    medical_advice: Optional[str] = None


# Highest threshold first.
RISK_LEVELS: Tuple[RiskLevel, ...] = (
    RiskLevel(
        "severe",
        0.8,
        ("Stay indoors with air purification", "Have emergency medications readily available"),
        "Consult healthcare provider immediately if experiencing symptoms",
    ),
    RiskLevel(
        "high",
        0.6,
        ("Wear N95 mask when outdoors", "Use air purifiers indoors"),
        "Monitor symptoms closely and consult doctor if needed",
    ),
    RiskLevel("moderate", 0.3, ("Consider wearing a mask outdoors", "Limit prolonged outdoor activities")),
    RiskLevel("low", 0.0, ("Normal activities are generally safe",)),
)


@dataclass(frozen=True)
class UserProfile:
    """Physiological and medical attributes relevant to pollution exposure.

    Every field has a default. Without an age the age rules are skipped;
    without a positive height no BMI is derived and the obesity rule does not
    apply.
    """

    age: Optional[float] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    medical_conditions: Tuple[str, ...] = ()
    allergies: Tuple[str, ...] = ()
    smoking_status: str = "never"
    activity_level: str = "low"

    def __post_init__(self) -> None:
        object.__setattr__(self, "medical_conditions", tuple(self.medical_conditions))
        object.__setattr__(self, "allergies", tuple(self.allergies))
        if self.smoking_status not in SMOKING_STATUSES:
            raise ValueError(f"smoking_status must be one of {SMOKING_STATUSES}")
        if self.activity_level not in ACTIVITY_LEVELS:
            raise ValueError(f"activity_level must be one of {ACTIVITY_LEVELS}")

    @property
    def bmi(self) -> Optional[float]:
        if not self.height_cm or self.height_cm <= 0 or self.weight_kg is None:
            return None
        return self.weight_kg / (self.height_cm / 100) ** 2

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "UserProfile":
        """Build a profile from loosely-typed data such as parsed JSON.

        Accepts snake_case or camelCase keys and ``height``/``weight`` as
        aliases. Unusable optional fields fall back to their defaults.
        """

        def pick(*keys: str) -> object:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        return cls(
            age=_recover(_coerce_number, "age", pick("age")),
            height_cm=_recover(_coerce_number, "height_cm", pick("height_cm", "heightCm", "height")),
            weight_kg=_recover(_coerce_number, "weight_kg", pick("weight_kg", "weightKg", "weight")),
            medical_conditions=_recover(
                _coerce_strings, "medical_conditions", pick("medical_conditions", "medicalConditions")
            )
            or (),
            allergies=_recover(_coerce_strings, "allergies", pick("allergies")) or (),
            smoking_status=_recover(
                _coerce_choice(SMOKING_STATUSES), "smoking_status", pick("smoking_status", "smokingStatus")
            )
            or "never",
            activity_level=_recover(
                _coerce_choice(ACTIVITY_LEVELS), "activity_level", pick("activity_level", "activityLevel")
            )
            or "low",
        )


def _coerce_number(name: str, value: object) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInputError(name, value, "expected a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(name, value, "expected a number") from exc
    if number < 0:
        raise InvalidInputError(name, value, "must not be negative")
    return number


def _coerce_strings(name: str, value: object) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(str(item) for item in value if str(item).strip())
    raise InvalidInputError(name, value, "expected a list of strings")


def _coerce_choice(choices: Tuple[str, ...]) -> Callable[[str, object], Optional[str]]:
    def coerce(name: str, value: object) -> Optional[str]:
        if value is None:
            return None
        choice = str(value).strip().lower()
        if choice not in choices:
            raise InvalidInputError(name, value, f"expected one of {choices}")
        return choice

    return coerce


def _recover(coerce: Callable[[str, object], object], name: str, value: object):
    try:
        return coerce(name, value)
    except InvalidInputError as exc:
        LOGGER.warning("Ignoring profile field %s", exc)
        return None


@dataclass(frozen=True)
class HealthRiskAssessment:
    level: str
    score: int
    factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    medical_advice: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "level": self.level,
            "score": self.score,
            "factors": list(self.factors),
            "recommendations": list(self.recommendations),
        }
        if self.medical_advice is not None:
            payload["medicalAdvice"] = self.medical_advice
        return payload


def _matches(condition: str, keywords: Tuple[str, ...]) -> bool:
    lowered = condition.lower()
    return any(keyword in lowered for keyword in keywords)


def risk_level(final_score: float) -> RiskLevel:
    for level in RISK_LEVELS:
        if final_score >= level.threshold:
            return level
    return RISK_LEVELS[-1]


def compute_health_risk(overall_index: float, profile: UserProfile) -> HealthRiskAssessment:
    """Score how exposed ``profile`` is at the given overall AQI.

    The AQI contributes up to 1.0 (saturating at 300); each triggered profile
    rule adds a fixed increment, and the total is capped at 1.0 before being
    reported on a 0-100 scale.
    """
    score = min(max(float(overall_index), 0.0) / INDEX_SATURATION, 1.0)
    factors: List[str] = []
    recommendations: List[str] = []

    def apply(rule: Tuple[str, float, str]) -> None:
        nonlocal score
        factor, increment, recommendation = rule
        score += increment
        factors.append(factor)
        recommendations.append(recommendation)

    if profile.age is None:
        LOGGER.debug("No age given; skipping age rules")
    elif profile.age > 65:
        apply(ADVANCED_AGE)
    elif profile.age < 18:
        apply(CHILD)

    for condition in profile.medical_conditions:
        if _matches(condition, RESPIRATORY_KEYWORDS):
            apply(RESPIRATORY)
        if _matches(condition, CARDIOVASCULAR_KEYWORDS):
            apply(CARDIOVASCULAR)

    if profile.allergies:
        apply(ALLERGY)

    if profile.smoking_status == "current":
        apply(SMOKING)

    bmi = profile.bmi
    if bmi is None:
        LOGGER.debug("No usable height/weight; skipping BMI rule")
    elif bmi > OBESITY_BMI:
        apply(OBESITY)

    if profile.activity_level == "high" and overall_index > HIGH_ACTIVITY_AQI:
        apply(HIGH_ACTIVITY)

    # Summed increments drift (0.7 + 0.1 == 0.7999...).
    final_score = min(round(score, 9), 1.0)
    level = risk_level(final_score)
    recommendations.extend(level.recommendations)
    return HealthRiskAssessment(
        level=level.name,
        score=round_half_away_from_zero(final_score * 100),
        factors=factors,
        recommendations=recommendations,
        medical_advice=level.medical_advice,
    )
