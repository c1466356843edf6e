"""Tests for ksense_assessment.classifier."""

import dataclasses

import pytest

from ksense_assessment.classifier import AssessmentReport, assess_patient, build_report


class TestAssessPatient:
    def test_high_risk_febrile(self):
        result = assess_patient({"patient_id": "A1", "blood_pressure": "150/95",
                                 "temperature": "101.2", "age": "70"})
        assert (result.bp_score, result.temp_score, result.age_score) == (4, 2, 2)
        assert result.total == 8
        assert result.high_risk
        assert result.fever
        assert not result.data_quality_issue

    def test_bad_temperature(self):
        result = assess_patient({"patient_id": "B2", "blood_pressure": "120/70",
                                 "temperature": "abc", "age": "50"})
        assert (result.bp_score, result.temp_score, result.age_score) == (2, 0, 1)
        assert result.total == 3
        assert not result.high_risk
        assert not result.fever
        assert result.data_quality_issue

    def test_missing_blood_pressure(self):
        result = assess_patient({"patient_id": "C3", "blood_pressure": None,
                                 "temperature": "99.7", "age": "30"})
        assert (result.bp_score, result.temp_score, result.age_score) == (0, 1, 1)
        assert result.total == 2
        assert not result.high_risk
        assert result.fever
        assert result.data_quality_issue

    def test_malformed_field_still_scored(self):
        result = assess_patient({"patient_id": "D4", "blood_pressure": "160/100",
                                 "temperature": 98.0, "age": None})
        assert result.total == 4
        assert result.high_risk
        assert result.data_quality_issue

    def test_total_matches_sub_scores(self):
        result = assess_patient({"patient_id": "F6", "blood_pressure": "125/70",
                                 "temperature": "100.2", "age": "80"})
        assert result.total == result.bp_score + result.temp_score + result.age_score == 5

    def test_idempotent(self):
        record = {"patient_id": "E5", "blood_pressure": "135/85", "temperature": "100.1", "age": 67}
        assert assess_patient(record) == assess_patient(record)
        assert build_report([record]) == build_report([record])


class TestBuildReport:
    def test_lists_in_input_order(self):
        patients = [
            {"patient_id": "A1", "blood_pressure": "150/95", "temperature": "101.2", "age": "70"},
            {"patient_id": "B2", "blood_pressure": "120/70", "temperature": "abc", "age": "50"},
            {"patient_id": "C3", "blood_pressure": None, "temperature": "99.7", "age": "30"},
        ]
        report = build_report(patients)
        assert report.high_risk_patients == ("A1",)
        assert report.fever_patients == ("A1", "C3")
        assert report.data_quality_issues == ("B2", "C3")

    def test_payload_shape(self):
        report = build_report([{"patient_id": 7, "blood_pressure": "150/95",
                                "temperature": "101.2", "age": "70"}])
        assert report.to_payload() == {
            "high_risk_patients": [7],
            "fever_patients": [7],
            "data_quality_issues": [],
        }
        assert report.counts() == {"high_risk_patients": 1, "fever_patients": 1,
                                   "data_quality_issues": 0}

    def test_empty(self):
        assert build_report([]) == AssessmentReport()

    def test_report_is_immutable(self):
        report = build_report([])
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.fever_patients = ("X",)

    def test_separate_runs_share_nothing(self):
        first = build_report([{"patient_id": "A1", "temperature": "101"}])
        second = build_report([])
        assert first.fever_patients == ("A1",)
        assert second.fever_patients == ()
