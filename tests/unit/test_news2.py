"""
Unit Tests for the NEWS2 Scoring Engine

Band boundaries for every parameter, the aggregate risk bands and the
single-parameter red-flag rule.
"""
from dataclasses import replace

import pytest

from pharmacy_first.core.news2 import (
    ClinicalRisk,
    ConsciousnessLevel,
    NEWS2Parameters,
    OxygenScale,
    calculate_news2,
    classify_total,
    score_consciousness,
    score_heart_rate,
    score_oxygen_saturation,
    score_respiratory_rate,
    score_supplemental_oxygen,
    score_systolic_bp,
    score_temperature,
)
from pharmacy_first.core.news2.engine import (
    RESPONSE_HIGH,
    RESPONSE_LOW,
    RESPONSE_MEDIUM,
    RESPONSE_RED_FLAG,
    RESPONSE_ZERO,
)


class TestParameterScores:
    """Per-parameter band boundaries."""

    @pytest.mark.parametrize("rate,expected", [
        (0, 3), (5, 3), (8, 3),
        (9, 1), (11, 1),
        (12, 0), (16, 0), (20, 0),
        (21, 2), (24, 2),
        (25, 3), (60, 3),
    ])
    def test_respiratory_rate(self, rate, expected):
        assert score_respiratory_rate(rate) == expected

    @pytest.mark.parametrize("temp,expected", [
        (30.0, 3), (35.0, 3),
        (35.1, 1), (36.0, 1),
        (36.1, 0), (37.0, 0), (38.0, 0),
        (38.1, 1), (39.0, 1),
        (39.1, 2), (42.0, 2),
    ])
    def test_temperature(self, temp, expected):
        assert score_temperature(temp) == expected

    @pytest.mark.parametrize("bp,expected", [
        (60, 3), (90, 3),
        (91, 2), (100, 2),
        (101, 1), (110, 1),
        (111, 0), (219, 0),
        (220, 3), (260, 3),
    ])
    def test_systolic_bp(self, bp, expected):
        assert score_systolic_bp(bp) == expected

    @pytest.mark.parametrize("rate,expected", [
        (30, 3), (40, 3),
        (41, 1), (50, 1),
        (51, 0), (90, 0),
        (91, 1), (110, 1),
        (111, 2), (130, 2),
        (131, 3), (200, 3),
    ])
    def test_heart_rate(self, rate, expected):
        assert score_heart_rate(rate) == expected

    def test_supplemental_oxygen(self):
        assert score_supplemental_oxygen(True) == 2
        assert score_supplemental_oxygen(False) == 0

    def test_consciousness(self):
        assert score_consciousness(ConsciousnessLevel.ALERT) == 0
        assert score_consciousness(ConsciousnessLevel.CVPU) == 3

    def test_consciousness_accepts_plain_values(self):
        assert score_consciousness("alert") == 0
        assert score_consciousness("cvpu") == 3


class TestOxygenSaturation:
    """SpO2 on both scales."""

    @pytest.mark.parametrize("spo2,expected", [
        (85, 3), (91, 3),
        (92, 2), (93, 2),
        (94, 1), (95, 1),
        (96, 0), (100, 0),
    ])
    def test_scale1(self, spo2, expected):
        assert score_oxygen_saturation(spo2, OxygenScale.SCALE1, False) == expected

    def test_scale1_ignores_oxygen_flag(self):
        for spo2 in (88, 92, 94, 97):
            assert (
                score_oxygen_saturation(spo2, OxygenScale.SCALE1, True)
                == score_oxygen_saturation(spo2, OxygenScale.SCALE1, False)
            )

    @pytest.mark.parametrize("spo2,expected", [
        (80, 3), (83, 3),
        (84, 2), (85, 2),
        (86, 1), (87, 1),
        (88, 0), (92, 0),
    ])
    def test_scale2_below_target(self, spo2, expected):
        assert score_oxygen_saturation(spo2, OxygenScale.SCALE2, False) == expected
        assert score_oxygen_saturation(spo2, OxygenScale.SCALE2, True) == expected

    @pytest.mark.parametrize("spo2,expected", [
        (92, 0),
        (93, 1), (94, 1),
        (95, 2), (96, 2),
        (97, 3), (100, 3),
    ])
    def test_scale2_on_oxygen(self, spo2, expected):
        assert score_oxygen_saturation(spo2, OxygenScale.SCALE2, True) == expected

    @pytest.mark.parametrize("spo2", [93, 95, 97, 100])
    def test_scale2_room_air_high_saturation_scores_zero(self, spo2):
        assert score_oxygen_saturation(spo2, OxygenScale.SCALE2, False) == 0

    def test_scale_accepts_plain_value(self):
        assert score_oxygen_saturation(97, "scale2", True) == 3


class TestRiskBands:
    """Aggregate classification before the red-flag rule."""

    def test_zero(self):
        assert classify_total(0) == (ClinicalRisk.LOW, RESPONSE_ZERO)

    @pytest.mark.parametrize("total", [1, 4])
    def test_low(self, total):
        assert classify_total(total) == (ClinicalRisk.LOW, RESPONSE_LOW)

    @pytest.mark.parametrize("total", [5, 6])
    def test_medium(self, total):
        assert classify_total(total) == (ClinicalRisk.MEDIUM, RESPONSE_MEDIUM)

    @pytest.mark.parametrize("total", [7, 20])
    def test_high(self, total):
        assert classify_total(total) == (ClinicalRisk.HIGH, RESPONSE_HIGH)


class TestCalculateNEWS2:
    """End-to-end clinical scenarios."""

    def test_normal_observations(self, normal_observations):
        result = calculate_news2(normal_observations)

        assert result.total_score == 0
        assert result.clinical_risk == ClinicalRisk.LOW
        assert result.clinical_response == RESPONSE_ZERO
        assert result.red_flag is False
        assert all(v == 0 for v in result.breakdown.values())

    def test_moderate_observations(self):
        result = calculate_news2(NEWS2Parameters(
            respiratory_rate=23,
            oxygen_saturation=94,
            oxygen_scale=OxygenScale.SCALE1,
            supplemental_oxygen=False,
            temperature=38.5,
            systolic_bp=108,
            heart_rate=95,
            consciousness=ConsciousnessLevel.ALERT,
        ))

        assert result.total_score == 6
        assert result.clinical_risk == ClinicalRisk.MEDIUM
        assert result.clinical_response == RESPONSE_MEDIUM
        assert result.breakdown.respiratory_rate == 2
        assert result.breakdown.oxygen_saturation == 1
        assert result.breakdown.temperature == 1
        assert result.breakdown.systolic_bp == 1
        assert result.breakdown.heart_rate == 1

    def test_critical_observations(self):
        result = calculate_news2(NEWS2Parameters(
            respiratory_rate=28,
            oxygen_saturation=89,
            oxygen_scale=OxygenScale.SCALE1,
            supplemental_oxygen=True,
            temperature=35.0,
            systolic_bp=85,
            heart_rate=135,
            consciousness=ConsciousnessLevel.CVPU,
        ))

        assert result.total_score == 20
        assert result.clinical_risk == ClinicalRisk.HIGH
        assert result.clinical_response == RESPONSE_HIGH
        assert result.red_flag is True

    def test_red_flag_with_low_total(self, normal_observations):
        result = calculate_news2(replace(normal_observations, respiratory_rate=7))

        assert result.total_score == 3
        assert result.breakdown.respiratory_rate == 3
        assert result.clinical_risk == ClinicalRisk.MEDIUM
        assert result.clinical_response == RESPONSE_RED_FLAG
        assert result.red_flag is True

    def test_red_flag_with_medium_total_keeps_medium_response(self, normal_observations):
        # consciousness 3 + heart rate 2 = 5
        result = calculate_news2(replace(
            normal_observations,
            consciousness=ConsciousnessLevel.CVPU,
            heart_rate=120,
        ))

        assert result.total_score == 5
        assert result.clinical_risk == ClinicalRisk.MEDIUM
        assert result.clinical_response == RESPONSE_MEDIUM

    def test_red_flag_never_downgrades_high(self, normal_observations):
        # systolic 3 + respiratory 2 + heart rate 2 = 7
        result = calculate_news2(replace(
            normal_observations,
            systolic_bp=80,
            respiratory_rate=22,
            heart_rate=125,
        ))

        assert result.total_score == 7
        assert result.clinical_risk == ClinicalRisk.HIGH
        assert result.clinical_response == RESPONSE_HIGH

    def test_low_total_without_red_flag_stays_low(self, normal_observations):
        # supplemental oxygen 2 + temperature 1 = 3, nothing scores 3
        result = calculate_news2(replace(
            normal_observations,
            supplemental_oxygen=True,
            temperature=38.6,
        ))

        assert result.total_score == 3
        assert result.clinical_risk == ClinicalRisk.LOW
        assert result.clinical_response == RESPONSE_LOW
        assert result.red_flag is False

    @pytest.mark.parametrize("change", [
        {"respiratory_rate": 30},
        {"oxygen_saturation": 90},
        {"temperature": 34.0},
        {"systolic_bp": 88},
        {"heart_rate": 140},
        {"consciousness": ConsciousnessLevel.CVPU},
        {"oxygen_scale": OxygenScale.SCALE2, "oxygen_saturation": 80},
    ])
    def test_any_single_red_flag_is_at_least_medium(self, normal_observations, change):
        result = calculate_news2(replace(normal_observations, **change))

        assert 1 <= result.total_score <= 6
        assert result.clinical_risk in (ClinicalRisk.MEDIUM, ClinicalRisk.HIGH)

    def test_pure_function(self, normal_observations):
        params = replace(normal_observations, heart_rate=112, temperature=39.4)
        assert calculate_news2(params) == calculate_news2(params)
        assert calculate_news2(params).to_dict() == calculate_news2(params).to_dict()

    def test_to_dict_is_json_compatible(self, normal_observations):
        data = calculate_news2(replace(normal_observations, respiratory_rate=7)).to_dict()

        assert data == {
            "total_score": 3,
            "breakdown": {
                "respiratory_rate": 3,
                "oxygen_saturation": 0,
                "supplemental_oxygen": 0,
                "temperature": 0,
                "systolic_bp": 0,
                "heart_rate": 0,
                "consciousness": 0,
            },
            "clinical_risk": "medium",
            "clinical_response": RESPONSE_RED_FLAG,
            "red_flag": True,
        }
