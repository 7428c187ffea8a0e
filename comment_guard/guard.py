"""
Submission guard for a host platform's "preprocess comment" filter.

``CommentGuard.process`` loads the stopword list, scans the submission and
either hands the submission back untouched or, when a stopword is found,
runs the hooks, sends one operator notification and raises
``SubmissionBlocked`` for the host to turn into a 403 response.
"""

from typing import Any, Mapping, Optional, Union

from comment_guard.core.events import BlockedSubmissionEvent, EventType, HookRegistry, SubmissionEvent
from comment_guard.core.exceptions import GuardError, SubmissionBlocked
from comment_guard.core.interfaces import MailSender, PostLookup, RecipientResolver, StopwordSource
from comment_guard.domain.models import Blocked, MatchResult, PostContext, SubmissionFields
from comment_guard.filtering.scanner import SubmissionScanner
from comment_guard.filtering.stopwords import FileStopwordSource, StaticStopwordSource, StopwordLoader
from comment_guard.foundation.config import GuardConfig
from comment_guard.foundation.logging import LoggerMixin, OperationLogger, generate_correlation_id, get_correlation_id
from comment_guard.foundation.types import GuardStage
from comment_guard.notification.composer import NotificationComposer
from comment_guard.notification.mailers import LoggingMailSender, SmtpMailSender
from comment_guard.notification.recipients import EnvRecipientResolver

Submission = Union[SubmissionFields, Mapping[str, Any]]

POST_ID_KEYS = ("comment_post_ID", "post_id")


class CommentGuard(LoggerMixin):
    """Blocks submissions that contain a configured stopword."""

    def __init__(
        self,
        config: Optional[GuardConfig] = None,
        stopword_source: Optional[StopwordSource] = None,
        mail_sender: Optional[MailSender] = None,
        recipient_resolver: Optional[RecipientResolver] = None,
        post_lookup: Optional[PostLookup] = None,
        hooks: Optional[HookRegistry] = None
    ):
        """Initialize the guard.

        Args:
            config: Guard configuration (defaults apply when omitted)
            stopword_source: Backing list; defaults to the configured file
            mail_sender: Notification transport; defaults to logging only
            recipient_resolver: Platform default administrator address
            post_lookup: Resolves post titles and URLs for the notification
            hooks: Registry whose handlers observe allowed/blocked submissions
        """
        self.config = config or GuardConfig()

        if stopword_source is None:
            if self.config.stopwords.path:
                stopword_source = FileStopwordSource(self.config.stopwords.path, self.config.stopwords.encoding)
            else:
                stopword_source = StaticStopwordSource([])

        self.loader = StopwordLoader(
            stopword_source,
            max_batch_size=self.config.stopwords.max_batch_size,
            cache_by_mtime=self.config.stopwords.cache_by_mtime
        )
        self.scanner = SubmissionScanner(self.config.scan)
        self.composer = NotificationComposer(self.config.notification, recipient_resolver)
        self.mail_sender = mail_sender or LoggingMailSender()
        self.post_lookup = post_lookup
        self.hooks = hooks or HookRegistry()

    @classmethod
    def from_config(cls, config: GuardConfig, **collaborators) -> 'CommentGuard':
        """Build a guard that mails through the configured SMTP relay.

        Without an override recipient, notifications go to the address in
        COMMENT_GUARD_DEFAULT_ADMIN_EMAIL, read at send time.
        """
        collaborators.setdefault('mail_sender', SmtpMailSender(config.smtp))
        collaborators.setdefault('recipient_resolver', EnvRecipientResolver())
        return cls(config=config, **collaborators)

    def check(self, submission: Submission) -> MatchResult:
        """Scan a submission without any side effects."""
        return self.scanner.scan(self._as_fields(submission), self.loader.load())

    def process(self, submission: Submission, post_id: Optional[Any] = None) -> Submission:
        """Filter one submission.

        Args:
            submission: SubmissionFields or the host's comment mapping
            post_id: Post identifier; read from the mapping when omitted

        Returns:
            The submission object unchanged when it is clean

        Raises:
            SubmissionBlocked: when a stopword was found
        """
        fields = self._as_fields(submission)
        if post_id is None:
            post_id = self._post_id_of(submission)
        post_id = str(post_id) if post_id is not None else None

        operation = self.logger.start_operation(
            "process_submission",
            correlation_id=get_correlation_id() or generate_correlation_id(),
            post_id=post_id,
        )

        result = self.scanner.scan(fields, self.loader.load())

        if not result.is_blocked:
            self.hooks.publish(SubmissionEvent(
                event_type=EventType.SUBMISSION_ALLOWED,
                source=self.__class__.__name__,
                fields=fields,
                post_id=post_id,
            ))
            operation.complete("Submission allowed", outcome="allowed")
            return submission

        sent = self._notify(fields, result, post_id, operation)

        self.hooks.publish(BlockedSubmissionEvent(
            event_type=EventType.SUBMISSION_BLOCKED,
            source=self.__class__.__name__,
            fields=fields,
            post_id=post_id,
            matched_field=result.field,
            matched_term=result.matched_term,
            notification_sent=sent,
        ))
        operation.complete(
            "Submission blocked",
            outcome="blocked",
            matched_field=result.field.value,
            notification_sent=sent,
        )

        block = self.config.block_response
        raise SubmissionBlocked(block.message, title=block.title, status_code=block.status_code, result=result)

    def _notify(
        self,
        fields: SubmissionFields,
        result: Blocked,
        post_id: Optional[str],
        operation: OperationLogger
    ) -> bool:
        """Run the before-notification hooks and send one notification.

        Never raises: delivery problems are logged and the block stands.
        """
        if not self.config.notification.enabled:
            return False

        self.hooks.publish(BlockedSubmissionEvent(
            event_type=EventType.BEFORE_NOTIFICATION,
            source=self.__class__.__name__,
            fields=fields,
            post_id=post_id,
            matched_field=result.field,
            matched_term=result.matched_term,
        ))

        notifier = operation.logger.with_context(stage=GuardStage.NOTIFYING)
        try:
            payload = self.composer.build(fields, result.field, result.matched_term, self._lookup_post(post_id))
            return bool(self.mail_sender.send(payload.recipient, payload.subject, payload.body))
        except GuardError as e:
            notifier.warning(f"Notification not delivered: {e}", error_code=e.error_code)
        except Exception as e:
            notifier.exception(f"Notification not delivered: {e}", transport=self.mail_sender.transport_name)
        return False

    def _lookup_post(self, post_id: Optional[str]) -> PostContext:
        if self.post_lookup is None or post_id is None:
            return PostContext(post_id=post_id)
        try:
            return self.post_lookup.get_post_context(post_id)
        except Exception as e:
            self.logger.warning(f"Post lookup failed for {post_id}: {e}", post_id=post_id)
            return PostContext(post_id=post_id)

    @staticmethod
    def _as_fields(submission: Submission) -> SubmissionFields:
        if isinstance(submission, SubmissionFields):
            return submission
        if isinstance(submission, Mapping):
            return SubmissionFields.from_mapping(submission)
        raise TypeError(f"Unsupported submission type: {type(submission).__name__}")

    @staticmethod
    def _post_id_of(submission: Submission) -> Optional[Any]:
        if isinstance(submission, Mapping):
            for key in POST_ID_KEYS:
                if submission.get(key) not in (None, ""):
                    return submission[key]
        return None
