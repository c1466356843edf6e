"""Fixed clinical scoring rules.

Each sub-score takes already-parsed values; an invalid (``None``) input
scores 0.
"""

HIGH_RISK_THRESHOLD = 4
FEVER_THRESHOLD = 99.6


def score_bp(systolic, diastolic):
    if systolic is None or diastolic is None:
        return 0
    # first matching stage wins; order matters since the bands overlap
    if systolic < 120 and diastolic < 80:
        return 1  # Normal
    if 120 <= systolic <= 129 and diastolic < 80:
        return 2  # Elevated
    if (130 <= systolic <= 139) or (80 <= diastolic <= 89):
        return 3  # Stage 1
    if systolic >= 140 or diastolic >= 90:
        return 4  # Stage 2
    return 0


def score_temp(temp):
    if temp is None:
        return 0
    if temp <= 99.5:
        return 0
    if 99.6 <= temp <= 100.9:
        return 1
    if temp >= 101.0:
        return 2
    return 0


def score_age(age):
    if age is None:
        return 0
    if age < 40:
        return 1
    if 40 <= age <= 65:
        return 1
    if age > 65:
        return 2
    return 0


def total_score(vitals):
    return (
        score_bp(vitals.systolic, vitals.diastolic)
        + score_temp(vitals.temperature)
        + score_age(vitals.age)
    )


def is_high_risk(total):
    return total >= HIGH_RISK_THRESHOLD


def has_fever(temp):
    return temp is not None and temp >= FEVER_THRESHOLD
