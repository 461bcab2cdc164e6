"""
Password strength scoring.

Scores a password from 0 to 4: one point per satisfied requirement, a half
point bonus for length, penalties for common patterns and repeated
characters. A password is acceptable when every requirement is met and the
score is at least 3.
"""

import re

from pydantic import BaseModel

# (id, description, pattern)
PASSWORD_REQUIREMENTS: list[tuple[str, str, str]] = [
    ("length", "At least 8 characters", r".{8,}"),
    ("lowercase", "At least one lowercase letter", r"[a-z]"),
    ("uppercase", "At least one uppercase letter", r"[A-Z]"),
    ("number", "At least one number", r"[0-9]"),
    ("symbol", "At least one symbol (!@#$%^&*)", r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]"),
]

COMMON_PATTERNS = [
    r"123456",
    r"password",
    r"qwerty",
    r"abc123",
    r"admin",
    r"letmein",
    r"welcome",
    r"monkey",
    r"dragon",
]


class PasswordStrength(BaseModel):
    score: float
    is_valid: bool
    label: str
    missing_requirements: list[str]
    feedback: list[str]


def has_common_pattern(password: str) -> bool:
    return any(re.search(pattern, password, re.IGNORECASE) for pattern in COMMON_PATTERNS)


def has_repeated_characters(password: str) -> bool:
    # 3 or more identical characters in a row
    return re.search(r"(.)\1{2,}", password) is not None


def strength_label(score: float) -> str:
    if score >= 4:
        return "Very strong"
    if score >= 3:
        return "Strong"
    if score >= 2:
        return "Moderate"
    if score >= 1:
        return "Weak"
    return "Very weak"


def evaluate_password_strength(password: str) -> PasswordStrength:
    if not password:
        return PasswordStrength(
            score=0,
            is_valid=False,
            label=strength_label(0),
            missing_requirements=[description for _, description, _ in PASSWORD_REQUIREMENTS],
            feedback=["Password is required"],
        )

    missing: list[str] = []
    feedback: list[str] = []
    score: float = 0

    for _, description, pattern in PASSWORD_REQUIREMENTS:
        if re.search(pattern, password):
            score += 1
        else:
            missing.append(description)

    if len(password) < 8:
        feedback.append("Password must be at least 8 characters long")
    elif len(password) >= 12:
        score += 0.5

    if has_common_pattern(password):
        feedback.append('Avoid common patterns like "123456" or "password"')
        score = max(0, score - 1)

    if has_repeated_characters(password):
        feedback.append("Avoid repeating the same character many times")
        score = max(0, score - 0.5)

    score = min(4, max(0, score))
    is_valid = not missing and score >= 3

    if score >= 3:
        feedback.insert(0, "Strong password!")
    elif score >= 2:
        feedback.insert(0, "Moderate password - consider improving it")
    else:
        feedback.insert(0, "Weak password - needs improvement")

    return PasswordStrength(
        score=score,
        is_valid=is_valid,
        label=strength_label(score),
        missing_requirements=missing,
        feedback=feedback,
    )
