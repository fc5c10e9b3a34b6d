"""
stylepass.generator
Candidate generator interface plus an offline implementation built on
Python's secrets module.
"""

import logging
import re
import string
from dataclasses import dataclass
from secrets import choice, SystemRandom
from typing import List, Optional

from .analyzer import SPECIAL_CHARACTERS

logger = logging.getLogger(__name__)

CANDIDATE_COUNT = 3
DEFAULT_SYMBOLS = SPECIAL_CHARACTERS
# characters that are easy to confuse when read or typed
LOOKALIKES = "O0oIl1|`'\";:.,"

_sysrand = SystemRandom()


class GenerationError(RuntimeError):
    """A generator could not produce a usable set of candidates."""


@dataclass(frozen=True)
class Requirements:
    uppercase: bool = False
    lowercase: bool = False
    numbers: bool = False
    special: bool = False

    def any(self) -> bool:
        return self.uppercase or self.lowercase or self.numbers or self.special

    def labels(self) -> List[str]:
        out = []
        if self.uppercase:
            out.append("uppercase letters")
        if self.lowercase:
            out.append("lowercase letters")
        if self.numbers:
            out.append("digits")
        if self.special:
            out.append("special characters")
        return out


@dataclass(frozen=True)
class Candidate:
    password: str
    explanation: str


class CandidateGenerator:
    """
    Turns a style description into CANDIDATE_COUNT candidates.
    Implementations raise GenerationError when they cannot.
    """

    def generate(self, style: str, length: int, requirements: Requirements) -> List[Candidate]:
        raise NotImplementedError


def generate(
    length: int = 16,
    use_upper: bool = True,
    use_lower: bool = True,
    use_digits: bool = True,
    use_symbols: bool = True,
    force_each: bool = True,
    symbols: Optional[str] = None,
    exclude: str = "",
) -> str:
    """
    Generate a cryptographically secure password.
    """
    if length <= 0:
        raise ValueError("length must be > 0")

    symbols = symbols or DEFAULT_SYMBOLS
    pools = []
    if use_upper:
        pools.append(string.ascii_uppercase)
    if use_lower:
        pools.append(string.ascii_lowercase)
    if use_digits:
        pools.append(string.digits)
    if use_symbols:
        pools.append(symbols)
    if exclude:
        pools = ["".join(c for c in p if c not in exclude) for p in pools]
        pools = [p for p in pools if p]
    if not pools:
        raise ValueError("At least one character set must be enabled")

    password_chars = []
    if force_each:
        for p in pools:
            password_chars.append(choice(p))

    all_chars = "".join(pools)
    remaining = length - len(password_chars)
    if remaining < 0:
        raise ValueError("length too small for the requested character classes")

    for _ in range(remaining):
        password_chars.append(choice(all_chars))

    _sysrand.shuffle(password_chars)
    return "".join(password_chars)


def _style_word(style: str, requirements: Requirements, max_len: int) -> str:
    """Pick a word from the style text and case it to fit the allowed classes."""
    words = [w for w in re.findall(r"[A-Za-z]+", style) if len(w) >= 3]
    if not words or max_len < 3:
        return ""
    word = choice(words)[:max_len]
    if requirements.lowercase and requirements.uppercase:
        return word.lower().capitalize()
    if requirements.lowercase:
        return word.lower()
    if requirements.uppercase:
        return word.upper()
    return ""


class LocalGenerator(CandidateGenerator):
    """Offline generator; the style text only seeds the word-based candidate."""

    def _random(self, length: int, requirements: Requirements, exclude: str = "") -> str:
        return generate(
            length=length,
            use_upper=requirements.uppercase,
            use_lower=requirements.lowercase,
            use_digits=requirements.numbers,
            use_symbols=requirements.special,
            exclude=exclude,
        )

    def _word_based(self, style: str, length: int, requirements: Requirements) -> Candidate:
        classes = len(requirements.labels())
        word = _style_word(style, requirements, length - classes)
        if not word:
            return Candidate(self._random(length, requirements), "Random mix, no usable word in the style")
        tail = self._random(length - len(word), requirements)
        return Candidate(word + tail, f"Starts with '{word}' from your style")

    def generate(self, style: str, length: int, requirements: Requirements) -> List[Candidate]:
        if not requirements.any():
            raise GenerationError("At least one character class must be requested")
        try:
            candidates = [
                Candidate(self._random(length, requirements), "Fully random from the chosen sets"),
                Candidate(self._random(length, requirements, exclude=LOOKALIKES), "Random, no look-alike characters"),
                self._word_based(style, length, requirements),
            ]
        except ValueError as e:
            raise GenerationError(str(e)) from e
        logger.debug("Generated %d local candidates (length=%d)", len(candidates), length)
        return candidates
