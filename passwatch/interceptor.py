from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .config import MonitorConfig
from .core import Verdict, classify, is_in_scope
from .dispatch import EventDispatcher
from .fingerprint import fingerprint
from .models import DEFAULT_SUBMISSION_KIND, DetectionEvent


logger = logging.getLogger(__name__)


class State(str, Enum):
    IDLE = "IDLE"
    GATED = "GATED"
    CLASSIFIED = "CLASSIFIED"
    DISPATCHED = "DISPATCHED"
    SUPPRESSED = "SUPPRESSED"


@dataclass(frozen=True)
class CredentialSubmission:
    identity: str
    secret: str = field(repr=False)
    submission_kind: str = DEFAULT_SUBMISSION_KIND


@dataclass(frozen=True)
class CycleResult:
    state: State
    trail: Tuple[State, ...]
    verdict: Optional[Verdict] = None
    event: Optional[DetectionEvent] = None
    future: Optional[Future] = field(default=None, repr=False, compare=False)

    @property
    def dispatched(self) -> bool:
        return self.state is State.DISPATCHED


def extract_credentials(fields: Iterable[Mapping[str, Any]],
                        submission_kind: str = DEFAULT_SUBMISSION_KIND) -> Optional[CredentialSubmission]:
    """
    Pick the first `email` and the first `password` input of a submitted form.
    Each field is a mapping with at least `type` and `value`. Returns None
    when the form has no email or no password input.
    """
    email = password = None
    for f in fields:
        kind = str(f.get("type", "")).lower()
        if kind == "email" and email is None:
            email = f.get("value") or ""
        elif kind == "password" and password is None:
            password = f.get("value") or ""
    if email is None or password is None:
        return None
    return CredentialSubmission(identity=email, secret=password, submission_kind=submission_kind)


class SubmissionInterceptor:
    """
    Runs one IDLE -> GATED -> CLASSIFIED -> DISPATCHED|SUPPRESSED -> IDLE
    cycle per submission. Holds only the immutable config and the
    dispatcher, so concurrent submissions never share state.
    """

    def __init__(self, config: MonitorConfig, dispatcher: Optional[EventDispatcher] = None):
        self.config = config
        self.dispatcher = dispatcher or EventDispatcher(config.collection_endpoint, timeout=config.timeout)

    def submit(self, identity: Optional[str], secret: Optional[str],
               submission_kind: str = DEFAULT_SUBMISSION_KIND) -> CycleResult:
        return self.process(CredentialSubmission(identity or "", secret or "", submission_kind))

    def submit_form(self, fields: Iterable[Mapping[str, Any]],
                    submission_kind: str = DEFAULT_SUBMISSION_KIND) -> Optional[CycleResult]:
        submission = extract_credentials(fields, submission_kind)
        if submission is None:
            logger.debug("form_ignored reason=missing_fields")
            return None
        return self.process(submission)

    def process(self, submission: CredentialSubmission) -> CycleResult:
        trail: List[State] = [State.IDLE]

        def finish(state: State, verdict: Optional[Verdict] = None,
                   event: Optional[DetectionEvent] = None, future: Optional[Future] = None) -> CycleResult:
            trail.append(state)
            trail.append(State.IDLE)
            return CycleResult(state=state, trail=tuple(trail), verdict=verdict, event=event, future=future)

        if not self.config.enabled:
            logger.debug("monitor_disabled")
            return finish(State.SUPPRESSED)

        trail.append(State.GATED)
        if not is_in_scope(submission.identity, self.config.corporate_domain_suffix):
            logger.info("submission_out_of_scope")
            return finish(State.SUPPRESSED)

        verdict = classify(submission.secret, self.config.common_passwords)
        trail.append(State.CLASSIFIED)
        if not verdict.is_weak:
            logger.info("strong_password identity=%s", submission.identity)
            return finish(State.SUPPRESSED, verdict)

        event = DetectionEvent(
            identity=submission.identity,
            fingerprint=fingerprint(submission.secret),
            submission_kind=submission.submission_kind,
        )
        logger.info("weak_password identity=%s reasons=%s",
                    submission.identity, ",".join(sorted(r.value for r in verdict.reasons)))
        future = self.dispatcher.dispatch(event)
        return finish(State.DISPATCHED, verdict, event, future)
