"""Value objects shared by the scanner, the notifier and the hooks."""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from comment_guard.foundation.types import SubmissionField, FIELD_ORDER

# Host pipeline comment keys, accepted alongside the short field names
HOST_FIELD_KEYS: Dict[SubmissionField, str] = {
    SubmissionField.CONTENT: "comment_content",
    SubmissionField.AUTHOR: "comment_author",
    SubmissionField.AUTHOR_EMAIL: "comment_author_email",
    SubmissionField.AUTHOR_URL: "comment_author_url",
    SubmissionField.AUTHOR_IP: "comment_author_IP",
}


@dataclass(frozen=True)
class SubmissionFields:
    """The five user-supplied fields of one submission."""
    content: str = ""
    author: str = ""
    author_email: str = ""
    author_url: str = ""
    author_ip: str = ""

    def __post_init__(self):
        for field in FIELD_ORDER:
            value = getattr(self, field.value)
            if value is None:
                object.__setattr__(self, field.value, "")
            elif not isinstance(value, str):
                object.__setattr__(self, field.value, str(value))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'SubmissionFields':
        """Build from short field names or host comment keys.

        Missing keys become empty strings; unknown keys are ignored.
        """
        values = {}
        for field in FIELD_ORDER:
            if field.value in data:
                values[field.value] = data[field.value]
            else:
                values[field.value] = data.get(HOST_FIELD_KEYS[field], "")
        return cls(**values)

    def get(self, field: SubmissionField) -> str:
        return getattr(self, field.value)

    def items(self) -> Iterator[Tuple[SubmissionField, str]]:
        """Yield (field, value) pairs in evaluation order."""
        for field in FIELD_ORDER:
            yield field, self.get(field)

    def to_dict(self) -> Dict[str, str]:
        return {field.value: value for field, value in self.items()}


@dataclass(frozen=True)
class Clean:
    """No stopword found in any scanned field."""
    is_blocked = False


@dataclass(frozen=True)
class Blocked:
    """A stopword was found.

    ``matched_term`` is the text exactly as it appears in the submission.
    """
    field: SubmissionField
    matched_term: str
    is_blocked = True


MatchResult = Union[Clean, Blocked]

CLEAN = Clean()


@dataclass(frozen=True)
class PostContext:
    """Display details of the post a submission was made on."""
    post_id: Optional[str] = None
    title: str = ""
    url: str = ""


@dataclass(frozen=True)
class NotificationPayload:
    recipient: str
    subject: str
    body: str
