"""Turn fetched patient records into the three submission lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ksense_assessment.parsers import ParsedVitals, parse_vitals
from ksense_assessment.scoring import (
    has_fever,
    is_high_risk,
    score_age,
    score_bp,
    score_temp,
    total_score,
)


@dataclass(frozen=True)
class RiskAssessment:
    patient_id: Any
    vitals: ParsedVitals
    bp_score: int
    temp_score: int
    age_score: int
    total: int

    @property
    def high_risk(self) -> bool:
        return is_high_risk(self.total)

    @property
    def fever(self) -> bool:
        return has_fever(self.vitals.temperature)

    @property
    def data_quality_issue(self) -> bool:
        return bool(self.vitals.invalid_fields)


@dataclass(frozen=True)
class AssessmentReport:
    high_risk_patients: Tuple[Any, ...] = ()
    fever_patients: Tuple[Any, ...] = ()
    data_quality_issues: Tuple[Any, ...] = ()

    def to_payload(self) -> Dict[str, List[Any]]:
        return {
            "high_risk_patients": list(self.high_risk_patients),
            "fever_patients": list(self.fever_patients),
            "data_quality_issues": list(self.data_quality_issues),
        }

    def counts(self) -> Dict[str, int]:
        return {k: len(v) for k, v in self.to_payload().items()}


def assess_patient(patient: Dict[str, Any]) -> RiskAssessment:
    vitals = parse_vitals(patient)
    return RiskAssessment(
        patient_id=patient.get("patient_id"),
        vitals=vitals,
        bp_score=score_bp(vitals.systolic, vitals.diastolic),
        temp_score=score_temp(vitals.temperature),
        age_score=score_age(vitals.age),
        total=total_score(vitals),
    )


def build_report(patients) -> AssessmentReport:
    """Score every patient; a record may land in several lists at once."""
    high_risk = []
    fever = []
    data_issues = []

    for p in patients:
        result = assess_patient(p)
        if result.high_risk:
            high_risk.append(result.patient_id)
        if result.fever:
            fever.append(result.patient_id)
        if result.data_quality_issue:
            data_issues.append(result.patient_id)

    return AssessmentReport(
        high_risk_patients=tuple(high_risk),
        fever_patients=tuple(fever),
        data_quality_issues=tuple(data_issues),
    )
