"""Checks for incoming generation requests."""

from dataclasses import dataclass
from typing import Any, List, Mapping

from .generator import Requirements

MIN_PATTERN = 3
MAX_PATTERN = 200
MIN_LENGTH = 8
MAX_LENGTH = 32


class ValidationError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__(", ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class GenerationRequest:
    style: str
    length: int
    requirements: Requirements


def parse_generation_request(data: Any) -> GenerationRequest:
    """
    Validate a {pattern, length, requirements} body.
    Every problem is collected before raising ValidationError.
    """
    if not isinstance(data, Mapping):
        raise ValidationError(["Request body must be a JSON object"])

    errors: List[str] = []

    pattern = data.get("pattern")
    if not pattern or not isinstance(pattern, str):
        errors.append("A pattern is required")
    elif len(pattern.strip()) < MIN_PATTERN:
        errors.append(f"The pattern must be at least {MIN_PATTERN} characters")
    elif len(pattern) > MAX_PATTERN:
        errors.append(f"The pattern cannot exceed {MAX_PATTERN} characters")

    length = data.get("length")
    if not length or isinstance(length, bool) or not isinstance(length, int):
        errors.append("A length is required")
    elif length < MIN_LENGTH or length > MAX_LENGTH:
        errors.append(f"The password length must be {MIN_LENGTH}-{MAX_LENGTH} characters")

    reqs = data.get("requirements")
    requirements = None
    if not reqs or not isinstance(reqs, Mapping):
        errors.append("Requirements are required")
    else:
        requirements = Requirements(
            uppercase=bool(reqs.get("uppercase")),
            lowercase=bool(reqs.get("lowercase")),
            numbers=bool(reqs.get("numbers")),
            special=bool(reqs.get("special")),
        )
        if not requirements.any():
            errors.append("Select at least one character class")

    if errors:
        raise ValidationError(errors)
    return GenerationRequest(style=pattern.strip(), length=length, requirements=requirements)
