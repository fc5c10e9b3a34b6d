"""
stylepass.analyzer

Password strength analyzer:
- charset_profile(password): which character classes appear
- calculate_entropy(password): length * log2(charset size), in bits
- calculate_crack_time(entropy): human-readable brute-force estimate
- analyze(password): StrengthReport with score (0-100), grade, entropy,
  crack time, class flags and warnings

Everything here is a pure function of its input.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

MIN_LENGTH = 8

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

COMMON_WORDS = (
    "password", "passwd", "admin", "user", "login", "welcome",
    "qwerty", "asdfgh", "zxcvbn", "letmein", "monkey", "dragon",
    "123456", "12345678", "abc123", "password123",
)

KEYBOARD_PATTERNS = ("qwert", "asdfg", "zxcvb")

GUESSES_PER_SECOND = 1e9

# charset contributions per class
LOWERCASE_POOL = 26
UPPERCASE_POOL = 26
DIGIT_POOL = 10
SPECIAL_POOL = 32

_LOWER_RE = re.compile(r"[a-z]")
_UPPER_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SPECIAL_RE = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")
# entropy pool and short-password flags count any other character as special
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")


def _runs(alphabet: str, size: int = 3) -> List[str]:
    return [alphabet[i:i + size] for i in range(len(alphabet) - size + 1)]


# abc..xyz and 012..789
_SEQUENTIAL_RE = re.compile(
    "|".join(_runs("abcdefghijklmnopqrstuvwxyz") + _runs("0123456789")),
    re.IGNORECASE | re.ASCII,
)
_KEYBOARD_RE = re.compile("|".join(KEYBOARD_PATTERNS), re.IGNORECASE | re.ASCII)
_REPEATED_RE = re.compile(r"(.)\1{2,}", re.DOTALL)

# seconds
_MINUTE = 60
_HOUR = 3600
_DAY = 86400
_YEAR = 31_536_000
_THOUSAND_YEARS = 31_536_000_000
_MILLION_YEARS = 31_536_000_000_000


class Grade(Enum):
    """Qualitative strength bucket. ``tier`` runs from 1 (highest risk) to 5."""

    NONE = ("none", 0, "#9ca3af")
    VERY_WEAK = ("very weak", 1, "#ef4444")
    WEAK = ("weak", 2, "#f97316")
    MODERATE = ("moderate", 3, "#eab308")
    STRONG = ("strong", 4, "#84cc16")
    VERY_STRONG = ("very strong", 5, "#10b981")

    def __init__(self, label: str, tier: int, color: str):
        self.label = label
        self.tier = tier
        self.color = color


@dataclass(frozen=True)
class Remark:
    message: str
    positive: bool = False


@dataclass(frozen=True)
class CharsetProfile:
    has_lowercase: bool = False
    has_uppercase: bool = False
    has_digit: bool = False
    has_special: bool = False

    @property
    def size(self) -> int:
        size = 0
        if self.has_lowercase:
            size += LOWERCASE_POOL
        if self.has_uppercase:
            size += UPPERCASE_POOL
        if self.has_digit:
            size += DIGIT_POOL
        if self.has_special:
            size += SPECIAL_POOL
        return size

    @property
    def complete(self) -> bool:
        return self.has_lowercase and self.has_uppercase and self.has_digit and self.has_special


@dataclass(frozen=True)
class StrengthReport:
    score: int
    grade: Grade
    length: int
    has_lowercase: bool
    has_uppercase: bool
    has_digit: bool
    has_special: bool
    entropy: float
    crack_time: str
    warnings: Tuple[Remark, ...] = ()

    @property
    def entropy_display(self) -> str:
        return f"{self.entropy:.1f}"

    @property
    def color(self) -> str:
        return self.grade.color

    def to_dict(self) -> Dict:
        return {
            "score": self.score,
            "grade": self.grade.label,
            "tier": self.grade.tier,
            "color": self.color,
            "length": self.length,
            "hasLowercase": self.has_lowercase,
            "hasUppercase": self.has_uppercase,
            "hasNumbers": self.has_digit,
            "hasSpecial": self.has_special,
            "entropy": self.entropy_display,
            "crackTime": self.crack_time,
            "warnings": [{"message": r.message, "positive": r.positive} for r in self.warnings],
        }


def charset_profile(password: str, broad: bool = False) -> CharsetProfile:
    """
    Class flags for a password. With ``broad`` any non-alphanumeric
    character counts as special, otherwise only SPECIAL_CHARACTERS do.
    """
    special_re = _NON_ALNUM_RE if broad else _SPECIAL_RE
    return CharsetProfile(
        has_lowercase=bool(_LOWER_RE.search(password)),
        has_uppercase=bool(_UPPER_RE.search(password)),
        has_digit=bool(_DIGIT_RE.search(password)),
        has_special=bool(special_re.search(password)),
    )


def charset_size(password: str) -> int:
    """Size of the brute-force pool used for entropy."""
    return charset_profile(password, broad=True).size


def calculate_entropy(password: str) -> float:
    """
    Brute-force entropy estimate in bits:
    - pool size = sum of the fixed contributions of the classes present,
      any non-alphanumeric character counting toward the special pool
    - entropy = length * log2(pool size), 0.0 for an empty password
    """
    size = charset_size(password)
    if size == 0:
        return 0.0
    return len(password) * math.log2(size)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"about {count:,} {unit}{'' if count == 1 else 's'}"


def calculate_crack_time(entropy: float) -> str:
    """
    Offline brute-force estimate at GUESSES_PER_SECOND, assuming the
    attacker searches half the keyspace on average.
    """
    try:
        seconds = 2.0 ** entropy / (2 * GUESSES_PER_SECOND)
    except OverflowError:
        return "effectively forever"

    if seconds < 1:
        return "under 1 second"
    if seconds < _MINUTE:
        return _plural(_round_half_up(seconds), "second")
    if seconds < _HOUR:
        return _plural(_round_half_up(seconds / _MINUTE), "minute")
    if seconds < _DAY:
        return _plural(_round_half_up(seconds / _HOUR), "hour")
    if seconds < _YEAR:
        return _plural(_round_half_up(seconds / _DAY), "day")
    if seconds < _THOUSAND_YEARS:
        return _plural(_round_half_up(seconds / _YEAR), "year")
    if seconds < _MILLION_YEARS:
        return f"about {_round_half_up(seconds / _THOUSAND_YEARS):,} thousand years"
    return f"about {_round_half_up(seconds / _MILLION_YEARS):,} million years"


def grade_for_score(score: int) -> Grade:
    if score >= 81:
        return Grade.VERY_STRONG
    if score >= 61:
        return Grade.STRONG
    if score >= 41:
        return Grade.MODERATE
    if score >= 21:
        return Grade.WEAK
    return Grade.VERY_WEAK


def detect_sequential(password: str) -> bool:
    return bool(_SEQUENTIAL_RE.search(password))


def detect_repeated(password: str) -> bool:
    return bool(_REPEATED_RE.search(password))


def detect_common_words(password: str) -> List[str]:
    """Return every dictionary word found (case-insensitive)."""
    lower = password.lower()
    return [word for word in COMMON_WORDS if word in lower]


def detect_keyboard_patterns(password: str) -> List[str]:
    found = {m.lower() for m in _KEYBOARD_RE.findall(password)}
    return [pattern for pattern in KEYBOARD_PATTERNS if pattern in found]


def _short_circuit(grade: Grade, password: str, message: str) -> StrengthReport:
    profile = charset_profile(password, broad=True)
    return StrengthReport(
        score=0,
        grade=grade,
        length=len(password),
        has_lowercase=profile.has_lowercase,
        has_uppercase=profile.has_uppercase,
        has_digit=profile.has_digit,
        has_special=profile.has_special,
        entropy=0.0,
        crack_time="N/A",
        warnings=(Remark(message),),
    )


def analyze(password: str) -> StrengthReport:
    """
    Score a password.

    Passwords shorter than MIN_LENGTH always score 0. Otherwise the score
    is built from length, character-class bonuses, pattern penalties and
    completeness bonuses, clamped to 0..100 and mapped to a Grade.
    """
    if not password:
        return _short_circuit(Grade.NONE, "", "Password required")

    length = len(password)
    if length < MIN_LENGTH:
        return _short_circuit(Grade.VERY_WEAK, password, f"Must be at least {MIN_LENGTH} characters")

    profile = charset_profile(password)
    warnings: List[Remark] = []

    score = min(length * 2, 40)

    if profile.has_lowercase:
        score += 10
    if profile.has_uppercase:
        score += 10
    if profile.has_digit:
        score += 10
    if profile.has_special:
        score += 15

    # penalties stack; order fixes warning order
    if detect_sequential(password):
        score -= 10
        warnings.append(Remark("Contains sequential characters"))

    if detect_repeated(password):
        score -= 10
        warnings.append(Remark("Contains repeated characters"))

    if detect_common_words(password):
        score -= 15
        warnings.append(Remark("Contains a common word"))

    if detect_keyboard_patterns(password):
        score -= 10
        warnings.append(Remark("Contains a keyboard pattern"))

    if length >= 20:
        score += 5
    if profile.complete:
        score += 10

    score = max(0, min(100, score))

    entropy = calculate_entropy(password)

    if length >= 12 and not warnings:
        warnings.append(Remark("Excellent password!", positive=True))

    return StrengthReport(
        score=score,
        grade=grade_for_score(score),
        length=length,
        has_lowercase=profile.has_lowercase,
        has_uppercase=profile.has_uppercase,
        has_digit=profile.has_digit,
        has_special=profile.has_special,
        entropy=entropy,
        crack_time=calculate_crack_time(entropy),
        warnings=tuple(warnings),
    )
