"""
Coherence and Event Validators

Deterministic checks on generated text. The coherence rules decide whether
a title/description pair is worth keeping or should be regenerated; the
event rules check the structure of a finished event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .base_generator import content_words
from .content_library import GENERIC_PHRASES


class ValidationSeverity(Enum):
    ERROR = "error"      # Text must be regenerated
    WARNING = "warning"  # Acceptable but weak
    INFO = "info"


@dataclass
class ValidationIssue:
    severity: ValidationSeverity
    rule: str
    message: str
    field: Optional[str] = None

    def __str__(self):
        if self.field:
            return f"[{self.severity.value}] {self.field}: {self.message}"
        return f"[{self.severity.value}] {self.message}"


def has_errors(issues: List[ValidationIssue]) -> bool:
    return any(issue.severity == ValidationSeverity.ERROR for issue in issues)


class CoherenceValidator:
    """
    Checks that a description belongs to its title: the two share vocabulary,
    the description is not filler, and it is long enough to say something.
    """

    MIN_DESCRIPTION_LENGTH = 20

    def __init__(self, generic_phrases=GENERIC_PHRASES):
        self.generic_phrases = {phrase.strip().lower() for phrase in generic_phrases}

    def validate(self, title: str, description: str) -> List[ValidationIssue]:
        """Run all coherence rules on a title/description pair."""
        issues = []

        # Rule 1: Title and description share a content word
        issues.extend(self._rule_shared_vocabulary(title, description))

        # Rule 2: Description is not a known filler phrase
        issues.extend(self._rule_not_generic(description))

        # Rule 3: Description is long enough
        issues.extend(self._rule_min_length(description))

        return issues

    def is_coherent(self, title: str, description: str) -> bool:
        return not has_errors(self.validate(title, description))

    def _rule_shared_vocabulary(self, title: str, description: str) -> List[ValidationIssue]:
        title_words = set(content_words(title))
        # A title with at most one content word has nothing to tie to
        if len(title_words) <= 1:
            return []
        if title_words & set(content_words(description)):
            return []
        return [ValidationIssue(
            severity=ValidationSeverity.ERROR,
            rule="shared_vocabulary",
            message=f"Description shares no content words with title '{title}'",
            field="description",
        )]

    def _rule_not_generic(self, description: str) -> List[ValidationIssue]:
        if (description or "").strip().lower() in self.generic_phrases:
            return [ValidationIssue(
                severity=ValidationSeverity.ERROR,
                rule="generic_phrase",
                message="Description is a generic filler phrase",
                field="description",
            )]
        return []

    def _rule_min_length(self, description: str) -> List[ValidationIssue]:
        length = len((description or "").strip())
        if length < self.MIN_DESCRIPTION_LENGTH:
            return [ValidationIssue(
                severity=ValidationSeverity.ERROR,
                rule="min_length",
                message=f"Description has {length} characters; at least {self.MIN_DESCRIPTION_LENGTH} required",
                field="description",
            )]
        return []


class EventValidator:
    """Structural checks for a generated (or hand-written) event."""

    TITLE_LENGTH = (3, 100)
    DESCRIPTION_LENGTH = (10, 1000)
    CHOICE_COUNT = (2, 5)

    def validate_event(self, event: Any) -> List[ValidationIssue]:
        data = event.model_dump() if hasattr(event, "model_dump") else event
        if not isinstance(data, dict):
            return [ValidationIssue(ValidationSeverity.ERROR, "structure", "Event must be a mapping")]

        issues = []
        issues.extend(self._rule_text_length(data, "title", self.TITLE_LENGTH))
        issues.extend(self._rule_text_length(data, "description", self.DESCRIPTION_LENGTH))
        issues.extend(self._rule_choices(data.get("choices")))
        return issues

    def _rule_text_length(self, data: Dict[str, Any], field: str, bounds) -> List[ValidationIssue]:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            return [ValidationIssue(ValidationSeverity.ERROR, "required", f"{field} is required", field)]
        low, high = bounds
        if not low <= len(value) <= high:
            return [ValidationIssue(
                ValidationSeverity.ERROR, "length",
                f"{field} must be {low}-{high} characters (got {len(value)})", field,
            )]
        return []

    def _rule_choices(self, choices: Any) -> List[ValidationIssue]:
        if not isinstance(choices, list):
            return [ValidationIssue(ValidationSeverity.ERROR, "required", "choices must be a list", "choices")]

        issues = []
        low, high = self.CHOICE_COUNT
        if not low <= len(choices) <= high:
            issues.append(ValidationIssue(
                ValidationSeverity.ERROR, "choice_count",
                f"Event must have {low}-{high} choices (got {len(choices)})", "choices",
            ))

        for i, choice in enumerate(choices):
            if not isinstance(choice, dict) or not str(choice.get("text", "")).strip():
                issues.append(ValidationIssue(
                    ValidationSeverity.ERROR, "choice_text", "Choice has no text", f"choices[{i}]",
                ))
                continue
            if not isinstance(choice.get("effect"), dict):
                issues.append(ValidationIssue(
                    ValidationSeverity.ERROR, "choice_effect", "Choice effect must be a mapping", f"choices[{i}]",
                ))
            elif not choice["effect"]:
                issues.append(ValidationIssue(
                    ValidationSeverity.WARNING, "choice_effect", "Choice has no effect", f"choices[{i}]",
                ))
        return issues
