"""
Batched, case-insensitive literal substring matching of submission fields.

Each batch of stopwords is compiled into one alternation of escaped terms.
Fields are checked in a fixed order and the first field with a match ends
the scan.
"""

import re
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from comment_guard.domain.models import Blocked, CLEAN, MatchResult, SubmissionFields
from comment_guard.filtering.stopwords import StopwordSet
from comment_guard.foundation.config import ScanConfig
from comment_guard.foundation.logging import LoggerMixin
from comment_guard.foundation.types import GuardStage, SubmissionField


@lru_cache(maxsize=128)
def compile_batch(batch: Tuple[str, ...]) -> Tuple['re.Pattern[str]', int]:
    """Compile a batch into (pattern, longest term length)."""
    pattern = re.compile("|".join(re.escape(term) for term in batch), re.IGNORECASE)
    return pattern, max(len(term) for term in batch)


def find_first_match(value: str, batches: Sequence[Tuple[str, ...]]) -> Optional['re.Match[str]']:
    """Find the leftmost stopword occurrence in ``value``.

    Ties at the same position go to the term listed first. Later batches are
    only searched for occurrences starting before the current best, so the
    result does not depend on how the list was batched.
    """
    best = None
    for batch in batches:
        if not batch:
            continue
        pattern, longest = compile_batch(batch)

        if best is None:
            best = pattern.search(value)
            continue

        if best.start() == 0:
            break
        # Any earlier occurrence ends at or before this bound
        endpos = min(len(value), best.start() - 1 + longest)
        candidate = pattern.search(value, 0, endpos)
        if candidate is not None and candidate.start() < best.start():
            best = candidate

    return best


class SubmissionScanner(LoggerMixin):
    """Checks submission fields against a StopwordSet."""

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self.set_log_context(stage=GuardStage.SCANNING)

    @property
    def scanned_fields(self) -> Tuple[SubmissionField, ...]:
        return tuple(self.config.scanned_fields)

    def scan(self, fields: SubmissionFields, stopwords: StopwordSet) -> MatchResult:
        """Return Blocked for the first field containing a stopword, else CLEAN.

        Args:
            fields: Submission to check
            stopwords: Normalized, batched stopword list

        Returns:
            Blocked(field, matched_term) with the term as typed, or CLEAN
        """
        if stopwords.is_empty:
            return CLEAN

        for field in self.scanned_fields:
            value = fields.get(field)
            if not value:
                continue

            match = find_first_match(value, stopwords.batches)
            if match is not None:
                self.logger.debug(
                    "Stopword matched",
                    field=field.value,
                    position=match.start(),
                    batches=len(stopwords.batches),
                )
                return Blocked(field=field, matched_term=match.group(0))

        return CLEAN
