#!/usr/bin/env python3
"""
Command line entry point.

    comment-guard list                      show the configured stopword list
    comment-guard check --content "..."     scan a submission (exit 1 if blocked)
"""

import argparse
import sys
from typing import List, Optional

from comment_guard.core.exceptions import SubmissionBlocked
from comment_guard.domain.models import SubmissionFields
from comment_guard.filtering.stopwords import FileStopwordSource, describe_stopword_list
from comment_guard.foundation.config import ConfigManager, GuardConfig
from comment_guard.foundation.logging import setup_logging, with_correlation_id
from comment_guard.guard import CommentGuard


EXIT_CLEAN = 0
EXIT_BLOCKED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="comment-guard", description="Stopword filter for comment submissions")
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--env-file', help='.env file with COMMENT_GUARD_* / SMTP_* settings')
    parser.add_argument('--stopwords', help='Stopword list file (overrides configuration)')
    parser.add_argument('--json-logs', action='store_true', help='Emit structured JSON logs')

    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('list', help='Show the configured stopword list')

    check = subparsers.add_parser('check', help='Scan a submission')
    check.add_argument('--content', default='')
    check.add_argument('--author', default='')
    check.add_argument('--email', dest='author_email', default='')
    check.add_argument('--url', dest='author_url', default='')
    check.add_argument('--ip', dest='author_ip', default='')
    check.add_argument('--post-id', help='Post identifier for the notification')
    check.add_argument('--notify', action='store_true',
                       help='Run the full filter: hooks, SMTP notification and block response')

    return parser


def load_guard_config(args: argparse.Namespace) -> GuardConfig:
    manager = ConfigManager()
    manager.load_from_env(args.env_file)
    if args.config:
        manager.load_from_yaml(args.config)
    manager.validate()

    config = manager.get_config()
    if args.stopwords:
        config.stopwords.path = args.stopwords
    return config


def run_list(config: GuardConfig) -> int:
    source = FileStopwordSource(config.stopwords.path or "", config.stopwords.encoding)
    summary = describe_stopword_list(source)

    print(f"Stopword list: {source.description}")
    if summary.last_modified:
        print(f"Last modified on: {summary.last_modified:%B %d, %Y, %I:%M %p}")

    if summary.terms is None:
        print(f"There are currently {summary.count} stopwords configured. The list is too long to display.")
    elif not summary.terms:
        print("No stopwords found.")
    else:
        for term in summary.terms:
            print(f"  {term}")
    return EXIT_CLEAN


@with_correlation_id()
def run_check(config: GuardConfig, args: argparse.Namespace) -> int:
    fields = SubmissionFields(
        content=args.content,
        author=args.author,
        author_email=args.author_email,
        author_url=args.author_url,
        author_ip=args.author_ip,
    )

    if not args.notify:
        result = CommentGuard(config).check(fields)
        if result.is_blocked:
            print(f"blocked: field={result.field.value} term={result.matched_term!r}")
            return EXIT_BLOCKED
        print("clean")
        return EXIT_CLEAN

    guard = CommentGuard.from_config(config)
    try:
        guard.process(fields, post_id=args.post_id)
    except SubmissionBlocked as blocked:
        print(f"{blocked.status_code} {blocked.title}: {blocked.message}")
        return EXIT_BLOCKED
    print("clean")
    return EXIT_CLEAN


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_guard_config(args)
    setup_logging(config.log_level, structured=args.json_logs)

    if args.command == 'list':
        return run_list(config)
    return run_check(config, args)


if __name__ == "__main__":
    sys.exit(main())
