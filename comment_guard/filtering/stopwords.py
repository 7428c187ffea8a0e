"""
Stopword list loading, normalization and batching.

The backing list holds one literal term per line. Terms are trimmed and
lower-cased; blank lines are dropped. A missing or unreadable list is the
same as an empty one.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from comment_guard.core.interfaces import StopwordSource
from comment_guard.foundation.logging import LoggerMixin

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_SIZE = 1000
# The list is only printed in full up to this many entries
DISPLAY_LIMIT = 50


def normalize_term(line: str) -> Optional[str]:
    """Turn one raw line into a stopword term, or None for blank lines."""
    term = line.rstrip("\r\n").strip()
    if not term:
        return None
    lowered = term.lower()
    # Some letters (e.g. U+0130) grow when lower-cased and would no longer
    # match themselves under IGNORECASE
    return lowered if len(lowered) == len(term) else term


def chunk(terms: Sequence[str], size: int) -> Tuple[Tuple[str, ...], ...]:
    """Split terms into consecutive tuples of at most ``size`` items."""
    return tuple(tuple(terms[i:i + size]) for i in range(0, len(terms), size))


@dataclass(frozen=True)
class StopwordSet:
    """Normalized terms partitioned into fixed-size batches.

    Batch boundaries only bound the size of each compiled pattern; they never
    change what matches.
    """
    terms: Tuple[str, ...] = ()
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    batches: Tuple[Tuple[str, ...], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.max_batch_size <= 0:
            raise ValueError(f"max_batch_size must be positive, got {self.max_batch_size}")
        object.__setattr__(self, 'terms', tuple(self.terms))
        object.__setattr__(self, 'batches', chunk(self.terms, self.max_batch_size))

    @classmethod
    def load(cls, lines: Iterable[str], max_batch_size: int = DEFAULT_MAX_BATCH_SIZE) -> 'StopwordSet':
        """Build a set from raw backing-list lines."""
        terms = [term for term in (normalize_term(line) for line in lines) if term is not None]
        return cls(terms=tuple(terms), max_batch_size=max_batch_size)

    @classmethod
    def empty(cls, max_batch_size: int = DEFAULT_MAX_BATCH_SIZE) -> 'StopwordSet':
        return cls(terms=(), max_batch_size=max_batch_size)

    @property
    def is_empty(self) -> bool:
        return not self.terms

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)


class FileStopwordSource(StopwordSource):
    """Reads the stopword list from a UTF-8 text file."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def read_lines(self) -> List[str]:
        if not self.path.is_file():
            logger.warning(f"Stopword list {self.path} not found; no stopwords configured")
            return []

        try:
            with open(self.path, 'r', encoding=self.encoding) as f:
                lines = [line.rstrip("\r\n") for line in f]
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Stopword list {self.path} could not be read ({e}); no stopwords configured")
            return []

        if lines:
            lines[0] = lines[0].lstrip("\ufeff")
        return lines

    def last_modified(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except OSError:
            return None

    @property
    def description(self) -> str:
        return str(self.path)


class StaticStopwordSource(StopwordSource):
    """In-memory list of lines, e.g. from a settings store."""

    def __init__(self, lines: Iterable[str], modified: Optional[float] = None):
        self.lines = list(lines)
        self.modified = modified

    def read_lines(self) -> List[str]:
        return list(self.lines)

    def last_modified(self) -> Optional[float]:
        return self.modified


class StopwordLoader(LoggerMixin):
    """Builds a StopwordSet from a source for every scan.

    With ``cache_by_mtime`` the last set is reused while the source reports
    the same modification time. Sources without a modification time are
    always re-read.
    """

    def __init__(
        self,
        source: StopwordSource,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        cache_by_mtime: bool = False
    ):
        if max_batch_size <= 0:
            raise ValueError(f"max_batch_size must be positive, got {max_batch_size}")
        self.source = source
        self.max_batch_size = max_batch_size
        self.cache_by_mtime = cache_by_mtime
        self._lock = threading.Lock()
        self._cached: Optional[StopwordSet] = None
        self._cached_mtime: Optional[float] = None

    def load(self) -> StopwordSet:
        if not self.cache_by_mtime:
            return self._build()

        mtime = self.source.last_modified()
        with self._lock:
            if mtime is not None and self._cached is not None and self._cached_mtime == mtime:
                return self._cached

            stopwords = self._build()
            if mtime is not None:
                self._cached, self._cached_mtime = stopwords, mtime
            else:
                self._cached, self._cached_mtime = None, None
            return stopwords

    def _build(self) -> StopwordSet:
        stopwords = StopwordSet.load(self.source.read_lines(), self.max_batch_size)
        self.logger.debug(
            "Loaded stopword list",
            source=self.source.description,
            terms=len(stopwords),
            batches=len(stopwords.batches),
        )
        return stopwords


@dataclass(frozen=True)
class StopwordListSummary:
    """What an operator sees when listing the configured stopwords."""
    count: int
    last_modified: Optional[datetime] = None
    # None when the list is too long to print
    terms: Optional[Tuple[str, ...]] = None


def describe_stopword_list(source: StopwordSource, display_limit: int = DISPLAY_LIMIT) -> StopwordListSummary:
    """Summarize the backing list as written (sorted, original casing)."""
    lines = [line.strip() for line in source.read_lines() if normalize_term(line) is not None]
    mtime = source.last_modified()
    last_modified = datetime.fromtimestamp(mtime) if mtime is not None else None

    if len(lines) > display_limit:
        return StopwordListSummary(count=len(lines), last_modified=last_modified)
    return StopwordListSummary(count=len(lines), last_modified=last_modified, terms=tuple(sorted(lines)))
