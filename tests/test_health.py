"""Tests for personalised health-risk scoring."""

import logging

import pytest

from airhealth.services.health import UserProfile, compute_health_risk, risk_level

ADULT = UserProfile(age=30, height_cm=175, weight_kg=70)


class TestScenarios:
    def test_elderly_asthmatic_smoker_is_severe(self):
        profile = UserProfile(
            age=70,
            height_cm=170,
            weight_kg=95,
            medical_conditions=("asthma",),
            smoking_status="current",
        )
        risk = compute_health_risk(150, profile)
        assert risk.score == 100
        assert risk.level == "severe"
        assert risk.factors == ["advanced age", "respiratory condition", "active smoking", "obesity"]
        assert risk.medical_advice
        assert risk.recommendations[-2:] == [
            "Stay indoors with air purification",
            "Have emergency medications readily available",
        ]

    def test_healthy_adult_clean_air_is_low(self):
        risk = compute_health_risk(30, ADULT)
        assert risk.score == 10
        assert risk.level == "low"
        assert risk.factors == []
        assert risk.recommendations == ["Normal activities are generally safe"]
        assert risk.medical_advice is None

    def test_moderate_threshold(self):
        risk = compute_health_risk(90, ADULT)
        assert risk.level == "moderate"
        assert risk.score == 30
        assert risk.medical_advice is None

    def test_high_level_has_medical_advice(self):
        child = UserProfile(age=10)
        risk = compute_health_risk(150, child)
        assert risk.level == "high"
        assert risk.score == 65
        assert risk.factors == ["child sensitivity"]
        assert risk.medical_advice == "Monitor symptoms closely and consult doctor if needed"

    def test_accumulated_increments_reach_threshold(self):
        profile = UserProfile(age=30, allergies=("pollen",))
        risk = compute_health_risk(210, profile)
        assert risk.level == "severe"
        assert risk.score == 80

    def test_base_saturates_above_300(self):
        assert compute_health_risk(450, ADULT).score == 100
        assert compute_health_risk(300, ADULT).score == 100

    def test_negative_index_treated_as_zero(self):
        assert compute_health_risk(-20, ADULT).score == 0


class TestRules:
    @pytest.mark.parametrize(
        "age, factors",
        [(66, ["advanced age"]), (65, []), (18, []), (17, ["child sensitivity"]), (None, [])],
    )
    def test_age(self, age, factors):
        assert compute_health_risk(0, UserProfile(age=age)).factors == factors

    def test_condition_matching_is_case_insensitive_substring(self):
        risk = compute_health_risk(0, UserProfile(age=30, medical_conditions=("Severe Asthma",)))
        assert risk.factors == ["respiratory condition"]
        assert risk.score == 30

    def test_each_matching_condition_counts(self):
        profile = UserProfile(age=30, medical_conditions=("asthma", "COPD", "diabetes"))
        risk = compute_health_risk(0, profile)
        assert risk.factors == ["respiratory condition", "respiratory condition"]
        assert risk.score == 60

    def test_condition_can_match_both_groups(self):
        profile = UserProfile(age=30, medical_conditions=("asthma with hypertension",))
        risk = compute_health_risk(0, profile)
        assert risk.factors == ["respiratory condition", "cardiovascular condition"]
        assert risk.score == 55

    def test_former_smoker_not_penalised(self):
        assert compute_health_risk(0, UserProfile(age=30, smoking_status="former")).score == 0

    def test_obesity(self):
        risk = compute_health_risk(0, UserProfile(age=30, height_cm=160, weight_kg=90))
        assert risk.factors == ["obesity"]

    @pytest.mark.parametrize("height", [0, None])
    def test_missing_height_skips_bmi(self, height):
        risk = compute_health_risk(0, UserProfile(age=30, height_cm=height, weight_kg=120))
        assert risk.factors == []
        assert risk.score == 0

    def test_high_activity_only_above_100(self):
        athlete = UserProfile(age=30, activity_level="high")
        assert "high-exposure activity" not in compute_health_risk(100, athlete).factors
        assert "high-exposure activity" in compute_health_risk(101, athlete).factors

    def test_recommendations_follow_factor_order(self):
        profile = UserProfile(age=70, allergies=("dust",))
        risk = compute_health_risk(0, profile)
        assert risk.recommendations[:2] == [
            "Limit outdoor exposure during high pollution",
            "Take antihistamines as prescribed",
        ]


class TestProperties:
    def test_monotonic_in_index(self):
        profile = UserProfile(age=40, allergies=("pollen",), activity_level="high")
        scores = [compute_health_risk(aqi, profile).score for aqi in range(0, 501, 5)]
        assert scores == sorted(scores)

    def test_monotonic_in_risk_attributes(self):
        profiles = [
            UserProfile(age=40),
            UserProfile(age=70),
            UserProfile(age=70, smoking_status="current"),
            UserProfile(age=70, smoking_status="current", allergies=("dust",)),
        ]
        scores = [compute_health_risk(60, profile).score for profile in profiles]
        assert scores == sorted(scores)

    def test_idempotent(self):
        profile = UserProfile(age=70, medical_conditions=("asthma",))
        assert compute_health_risk(120, profile) == compute_health_risk(120, profile)

    @pytest.mark.parametrize(
        "score, level",
        [(0.0, "low"), (0.29, "low"), (0.3, "moderate"), (0.6, "high"), (0.8, "severe"), (1.0, "severe")],
    )
    def test_level_thresholds(self, score, level):
        assert risk_level(score).name == level


class TestSerialisation:
    def test_low_risk_omits_medical_advice(self):
        payload = compute_health_risk(10, ADULT).to_dict()
        assert "medicalAdvice" not in payload
        assert payload["level"] == "low"

    def test_severe_risk_includes_medical_advice(self):
        payload = compute_health_risk(300, ADULT).to_dict()
        assert payload["medicalAdvice"].startswith("Consult healthcare provider")


class TestProfileFromMapping:
    def test_camel_case_keys(self):
        profile = UserProfile.from_mapping(
            {
                "age": "70",
                "heightCm": 170,
                "weightKg": 95,
                "medicalConditions": ["asthma"],
                "allergies": [],
                "smokingStatus": "Current",
                "activityLevel": "high",
            }
        )
        assert profile == UserProfile(
            age=70.0,
            height_cm=170.0,
            weight_kg=95.0,
            medical_conditions=("asthma",),
            smoking_status="current",
            activity_level="high",
        )

    def test_height_weight_aliases(self):
        profile = UserProfile.from_mapping({"age": 40, "height": 180, "weight": 80})
        assert profile.bmi == pytest.approx(24.69, abs=0.01)

    def test_invalid_fields_fall_back_to_defaults(self, caplog):
        with caplog.at_level(logging.WARNING, logger="airhealth.services.health"):
            profile = UserProfile.from_mapping(
                {"age": 30, "heightCm": "tall", "smokingStatus": "sometimes", "allergies": 5}
            )
        assert profile.height_cm is None
        assert profile.smoking_status == "never"
        assert profile.allergies == ()
        assert "height_cm" in caplog.text

    def test_missing_age_skips_age_rules(self):
        profile = UserProfile.from_mapping({"medicalConditions": "asthma, bronchitis"})
        assert profile.age is None
        assert compute_health_risk(0, profile).factors == ["respiratory condition", "respiratory condition"]

    def test_direct_construction_rejects_unknown_enum(self):
        with pytest.raises(ValueError):
            UserProfile(age=30, smoking_status="sometimes")
