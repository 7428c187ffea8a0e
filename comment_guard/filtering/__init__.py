"""
Filtering Module

Loads the stopword list and scans submissions against it.
"""

from .stopwords import (
    StopwordSet,
    StopwordLoader,
    FileStopwordSource,
    StaticStopwordSource,
    StopwordListSummary,
    describe_stopword_list
)
from .scanner import SubmissionScanner, find_first_match

__all__ = [
    'StopwordSet',
    'StopwordLoader',
    'FileStopwordSource',
    'StaticStopwordSource',
    'StopwordListSummary',
    'describe_stopword_list',
    'SubmissionScanner',
    'find_first_match'
]
