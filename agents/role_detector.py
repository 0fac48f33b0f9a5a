"""Role Detector: infers a visitor's professional role from research signals."""

import re
import logging
from typing import Callable, List, Mapping, NamedTuple, Optional, Union

from pydantic import ValidationError

from schemas.intelligence import RoleSignal, RoleResult

logger = logging.getLogger(__name__)

UNKNOWN_ROLE = RoleResult(role="Unknown", confidence=0.0)
FALLBACK_ROLE = RoleResult(role="Business Professional", confidence=0.2)

# Canonical vocabulary, checked in order
CANONICAL_ROLES = [
    (r"\bchief technology officer\b|\bcto\b", "CTO"),
    (r"\bchief executive officer\b|\bceo\b", "CEO"),
    (r"\bco-?founder\b|\bfounder\b", "Founder"),
    (r"\b(vp|vice president)( of)? engineering\b", "VP Engineering"),
    (r"\bhead of engineering\b", "Head of Engineering"),
    (r"\bhead of (ai|artificial intelligence)\b", "Head of AI"),
    (r"\bhead of (ml|machine learning)\b", "Head of ML"),
    (r"\bproduct manager\b", "Product Manager"),
    (r"\bdata scientist\b", "Data Scientist"),
    (r"\b(ml|machine learning) engineer\b", "ML Engineer"),
    (r"\bsoftware (engineer|developer)\b", "Software Engineer"),
    (r"\barchitect\b", "Architect"),
    (r"\bmarketing\b", "Marketing"),
    (r"\bsales\b", "Sales"),
    (r"\boperations\b", "Operations"),
]
_CANONICAL_PATTERNS = [(re.compile(pattern, re.IGNORECASE), label) for pattern, label in CANONICAL_ROLES]

TITLE_PATTERN = re.compile(
    r"\b(cto|ceo|co-?founder|founder|(vp|vice president)( of)? engineering"
    r"|head of (engineering|ai|ml)|product manager|marketing|sales|operations"
    r"|data scientist|ml engineer|software (engineer|developer)|architect)\b",
    re.IGNORECASE,
)


def canonicalize_role(text: str) -> Optional[str]:
    """Map free text to a canonical role label, or None if nothing fits."""
    for pattern, label in _CANONICAL_PATTERNS:
        if pattern.search(text):
            return label
    return None


def _direct_title(signal: RoleSignal) -> Optional[str]:
    text = (signal.person_role_text or "").strip()
    return text or None


def _keyword_title(signal: RoleSignal) -> Optional[str]:
    text = " ".join(
        part for part in (signal.person_seniority, signal.company_summary) if part
    )
    match = TITLE_PATTERN.search(text)
    return match.group(0) if match else None


def _normalize_direct(text: str) -> Optional[str]:
    # Explicit titles are trusted even without a canonical bucket
    return canonicalize_role(text) or text


class RoleRule(NamedTuple):
    """One step of the role cascade."""
    name: str
    predicate: Callable[[RoleSignal], Optional[str]]  # Returns the matched text
    normalizer: Callable[[str], Optional[str]]
    confidence: float


DEFAULT_RULES = [
    RoleRule("direct_title", _direct_title, _normalize_direct, 0.9),
    RoleRule("keyword_match", _keyword_title, canonicalize_role, 0.6),
]


class RoleDetector:
    """Confidence-ranked rule cascade over research signals."""

    def __init__(self, rules: Optional[List[RoleRule]] = None):
        """
        Initialize role detector.

        Args:
            rules: Ordered rules; the first one that yields a role wins
        """
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def detect_role(
        self,
        signal: Optional[Union[RoleSignal, Mapping[str, Optional[str]]]]
    ) -> RoleResult:
        """
        Detect the visitor's role.

        Args:
            signal: Research snapshot (model or plain mapping)

        Returns:
            RoleResult; "Unknown"/0.0 for a missing or empty signal,
            "Business Professional"/0.2 when no rule matches
        """
        if signal is None:
            return UNKNOWN_ROLE
        if not isinstance(signal, RoleSignal):
            try:
                signal = RoleSignal.model_validate(dict(signal))
            except (TypeError, ValueError, ValidationError) as e:
                logger.warning(f"Malformed role signal, treating as unknown: {e}")
                return UNKNOWN_ROLE
        if signal.is_empty():
            return UNKNOWN_ROLE

        for rule in self.rules:
            matched = rule.predicate(signal)
            if not matched:
                continue
            role = rule.normalizer(matched)
            if role:
                logger.debug(f"Role '{role}' detected by {rule.name} ({rule.confidence})")
                return RoleResult(role=role, confidence=rule.confidence)

        return FALLBACK_ROLE
