"""
stylepass.llm

OpenAI chat-completions backed CandidateGenerator. The model proposes
CANDIDATE_COUNT passwords for a style description; the reply must be a
JSON array of {"password", "explanation"} objects.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import requests

from .analyzer import charset_profile
from .generator import CANDIDATE_COUNT, Candidate, CandidateGenerator, GenerationError, Requirements

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a security expert who creates passwords.
You reflect the user's preferred style while keeping the passwords strong.

Rules:
1. Create exactly 3 passwords.
2. Use a different creative approach for each password.
3. Always respect the requested length and character classes.
4. Avoid predictable patterns.
5. Add a short explanation for each password.

Output format:
Reply with a JSON array only, no other text.
[
  {"password": "first password", "explanation": "how it was built (30 chars max)"},
  {"password": "second password", "explanation": "how it was built (30 chars max)"},
  {"password": "third password", "explanation": "how it was built (30 chars max)"}
]"""

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def build_prompt(style: str, length: int, requirements: Requirements) -> str:
    required = ", ".join(f"must include {label}" for label in requirements.labels())
    return (
        f'User style: "{style}"\n'
        "\n"
        "Requirements:\n"
        f"- Length: exactly {length} characters\n"
        f"- {required}\n"
        "\n"
        "Create 3 passwords that satisfy every requirement above.\n"
        "Each password must use a different creative style.\n"
        "Give each password a short explanation (30 characters or fewer).\n"
        "\n"
        "Important:\n"
        "- Avoid predictable patterns (123, abc, qwerty, ...)\n"
        "- Security comes first, but reflect the style\n"
        "- The passwords must be practical to use"
    )


def parse_candidates(content: str) -> List[Candidate]:
    """
    Parse the model reply. A ```json fenced block is unwrapped first.
    Raises GenerationError unless the reply holds exactly CANDIDATE_COUNT
    well-formed entries.
    """
    m = _FENCE_RE.search(content)
    raw = (m.group(1) if m else content).strip()
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.error("Unparsable model reply: %r", content)
        raise GenerationError("Could not parse the generated passwords") from e

    if not isinstance(data, list) or len(data) != CANDIDATE_COUNT:
        raise GenerationError("Unexpected response format")

    candidates = []
    for item in data:
        if not isinstance(item, dict):
            raise GenerationError("Unexpected response format")
        password = item.get("password")
        explanation = item.get("explanation", "")
        if not isinstance(password, str) or not password or not isinstance(explanation, str):
            raise GenerationError("Unexpected response format")
        candidates.append(Candidate(password=password, explanation=explanation))
    return candidates


def _meets(candidate: Candidate, length: int, requirements: Requirements) -> bool:
    profile = charset_profile(candidate.password)
    return (
        len(candidate.password) == length
        and (not requirements.uppercase or profile.has_uppercase)
        and (not requirements.lowercase or profile.has_lowercase)
        and (not requirements.numbers or profile.has_digit)
        and (not requirements.special or profile.has_special)
    )


class OpenAIGenerator(CandidateGenerator):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.9,
        max_tokens: int = 1000,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "OpenAIGenerator":
        return cls(
            api_key=settings.get("openai_api_key"),
            model=settings.get("openai_model", "gpt-4o-mini"),
            base_url=settings.get("openai_base_url", "https://api.openai.com/v1"),
            temperature=float(settings.get("temperature", 0.9)),
            max_tokens=int(settings.get("max_tokens", 1000)),
            timeout=float(settings.get("request_timeout", 30)),
        )

    def _complete(self, prompt: str) -> str:
        if not self.api_key:
            raise GenerationError("OpenAI API key is not configured")

        url = f"{self.base_url}/chat/completions"
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("OpenAI request failed: %s", e)
            raise GenerationError("Could not reach the OpenAI API") from e

        if not response.ok:
            message = "OpenAI API call failed"
            try:
                message = response.json()["error"]["message"] or message
            except (ValueError, KeyError, TypeError):
                pass
            logger.error("OpenAI API returned %s: %s", response.status_code, message)
            raise GenerationError(message)

        try:
            return response.json()["choices"][0]["message"]["content"].strip()
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise GenerationError("Unexpected response format") from e

    def generate(self, style: str, length: int, requirements: Requirements) -> List[Candidate]:
        content = self._complete(build_prompt(style, length, requirements))
        candidates = parse_candidates(content)
        for c in candidates:
            if not _meets(c, length, requirements):
                logger.warning("Model candidate misses the requested constraints (length=%d)", len(c.password))
        return candidates
