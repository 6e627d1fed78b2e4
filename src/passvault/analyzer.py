"""Password strength scoring and entropy estimation."""

import math
import string
from dataclasses import dataclass, field
from typing import List

WEAK_SCORE_THRESHOLD = 60

# (score exclusive upper bound, label)
STRENGTH_LABELS = [
    (40, "Weak"),
    (60, "Fair"),
    (75, "Good"),
    (90, "Strong"),
]
TOP_LABEL = "Very Strong"

UPPER_SIZE = len(string.ascii_uppercase)
LOWER_SIZE = len(string.ascii_lowercase)
DIGIT_SIZE = len(string.digits)
SYMBOL_SIZE = len(string.punctuation)

FEEDBACK_MIN_LENGTH = "Use at least 8 characters"
FEEDBACK_RECOMMENDED_LENGTH = "Consider using 12+ characters"
FEEDBACK_UPPER = "Add uppercase letters"
FEEDBACK_LOWER = "Add lowercase letters"
FEEDBACK_DIGIT = "Add digits (0-9)"
FEEDBACK_SYMBOL = "Add symbols (!@#$%)"
FEEDBACK_EXCELLENT = "Excellent password!"


@dataclass
class PasswordStrength:
    """Result of analyzing a single password."""

    score: int
    label: str
    entropy: float
    feedback: List[str] = field(default_factory=list)


def strength_label(score: int) -> str:
    """Map a 0-100 score to its label."""
    for bound, label in STRENGTH_LABELS:
        if score < bound:
            return label
    return TOP_LABEL


def analyze_password(password: str) -> PasswordStrength:
    """Score a password, estimate its entropy and list improvements.

    Only ASCII character classes count; the entropy estimate uses the
    classes actually present in ``password``.
    """
    length = len(password)
    has_upper = any(c in string.ascii_uppercase for c in password)
    has_lower = any(c in string.ascii_lowercase for c in password)
    has_digit = any(c in string.digits for c in password)
    has_symbol = any(c in string.punctuation for c in password)

    score = 0
    if length >= 8:
        score += 20
    if length >= 12:
        score += 15
    if length >= 16:
        score += 15
    if has_upper:
        score += 15
    if has_lower:
        score += 15
    if has_digit:
        score += 10
    if has_symbol:
        score += 10

    charset_size = (
        (UPPER_SIZE if has_upper else 0)
        + (LOWER_SIZE if has_lower else 0)
        + (DIGIT_SIZE if has_digit else 0)
        + (SYMBOL_SIZE if has_symbol else 0)
    )
    entropy = length * math.log2(charset_size) if charset_size else 0.0

    checks = [
        (length < 8, FEEDBACK_MIN_LENGTH),
        (length < 12, FEEDBACK_RECOMMENDED_LENGTH),
        (not has_upper, FEEDBACK_UPPER),
        (not has_lower, FEEDBACK_LOWER),
        (not has_digit, FEEDBACK_DIGIT),
        (not has_symbol, FEEDBACK_SYMBOL),
    ]
    feedback = [message for failed, message in checks if failed]
    if not feedback:
        feedback.append(FEEDBACK_EXCELLENT)

    return PasswordStrength(
        score=score,
        label=strength_label(score),
        entropy=entropy,
        feedback=feedback,
    )


def is_weak(password: str) -> bool:
    """True when the password scores below the weakness threshold."""
    return analyze_password(password).score < WEAK_SCORE_THRESHOLD
