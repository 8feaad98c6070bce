"""Application flow controller: drives one job's apply form to a terminal state.

    START -> TRIGGERING -> STEP_LOOP -> SUBMITTED | ABANDONED

Each STEP_LOOP iteration checks for completion, skips the cover letter,
answers what it can, then prefers "continue" over "submit". The loop is
capped at MAX_STEPS screens. A submit click counts as success whether or
not a confirmation message shows up afterwards.
"""
from __future__ import annotations

from applier.adapters.base import PlatformAdapter
from applier.answers import AnswerResolver
from applier.errors import (
    IllegalTransition,
    InteractionTimeout,
    SessionLost,
    StepCeilingExceeded,
    TriggerNotFound,
    classify_error,
    short_message,
)
from applier.log import get_logger
from applier.models import ApplicationAttempt, FlowState, Job

log = get_logger(__name__)

MAX_STEPS = 8
STEP_SETTLE_MS = 2000
CONFIRM_TIMEOUT_MS = 15_000

TRANSITIONS: dict[FlowState, frozenset[FlowState]] = {
    FlowState.START: frozenset({FlowState.TRIGGERING, FlowState.ABANDONED}),
    FlowState.TRIGGERING: frozenset({FlowState.STEP_LOOP, FlowState.ABANDONED}),
    FlowState.STEP_LOOP: frozenset({FlowState.STEP_LOOP, FlowState.SUBMITTED, FlowState.ABANDONED}),
    FlowState.SUBMITTED: frozenset(),
    FlowState.ABANDONED: frozenset(),
}


class ApplicationFlowController:
    def __init__(
        self,
        adapter: PlatformAdapter,
        resolver: AnswerResolver,
        *,
        max_steps: int = MAX_STEPS,
        confirm_timeout_ms: int = CONFIRM_TIMEOUT_MS,
    ) -> None:
        self.adapter = adapter
        self.resolver = resolver
        self.max_steps = max_steps
        self.confirm_timeout_ms = confirm_timeout_ms
        self.last_attempt: ApplicationAttempt | None = None

    def run(self, job: Job) -> bool:
        """Attempt one application. Never raises; returns True once submitted."""
        attempt = ApplicationAttempt(job=job)
        self.last_attempt = attempt
        log.info("Applying to: %s at %s", job.title, job.company)
        log.info("  %s | %s | %s", job.location, job.work_type, job.salary)

        try:
            self._drive(attempt)
        except (TriggerNotFound, StepCeilingExceeded) as exc:
            self._abandon(attempt, str(exc))
            log.warning("  %s — skipping %s", exc, job.title)
        except Exception as exc:
            err = classify_error(exc)
            self._abandon(attempt, short_message(err))
            if isinstance(err, SessionLost):
                log.warning("  Browser tab closed unexpectedly — job may have opened an external site")
            else:
                log.error("  Error applying to %s: %s", job.title, short_message(err))

        if attempt.answered:
            log.debug("  Answered %d question(s) for %s", len(attempt.answered), job.title)
        return attempt.succeeded

    # -- state machine -------------------------------------------------------

    def _transition(self, attempt: ApplicationAttempt, new_state: FlowState) -> None:
        if new_state not in TRANSITIONS[attempt.state]:
            raise IllegalTransition(f"{attempt.state.value} -> {new_state.value}")
        attempt.state = new_state

    def _abandon(self, attempt: ApplicationAttempt, reason: str) -> None:
        attempt.reason = reason
        if not attempt.state.is_terminal:
            attempt.state = FlowState.ABANDONED

    def _drive(self, attempt: ApplicationAttempt) -> None:
        self._transition(attempt, FlowState.TRIGGERING)
        self.adapter.open_job(attempt.job)
        if not self.adapter.find_apply_trigger():
            raise TriggerNotFound("No Apply button found")

        self._transition(attempt, FlowState.STEP_LOOP)
        while attempt.step < self.max_steps:
            attempt.step += 1
            self.adapter.pause(STEP_SETTLE_MS)
            log.info("  -- Step %d --", attempt.step)

            next_state = self._step(attempt)
            self._transition(attempt, next_state)
            if next_state.is_terminal:
                return

        raise StepCeilingExceeded(f"Could not complete application in {self.max_steps} steps")

    def _step(self, attempt: ApplicationAttempt) -> FlowState:
        adapter = self.adapter

        if adapter.detect_completion_signal():
            log.info("  Application confirmed for %s", attempt.job.title)
            return FlowState.SUBMITTED

        adapter.skip_cover_letter()
        self._answer_questions(attempt)
        adapter.reveal()

        # Continue first: a form can show an enabled "continue" next to an early "submit"
        if adapter.find_continue_trigger():
            log.info("  Clicked Continue — moving to next step")
            adapter.pause(STEP_SETTLE_MS)
            return FlowState.STEP_LOOP

        if adapter.find_submit_trigger():
            log.info("  Submit clicked, waiting for confirmation...")
            if adapter.wait_for_completion(self.confirm_timeout_ms):
                log.info("  Confirmed! Application submitted for %s", attempt.job.title)
            else:
                log.info("  Submit clicked — confirmation not detected but moving on")
            return FlowState.SUBMITTED

        raise TriggerNotFound("No actionable button found")

    def _answer_questions(self, attempt: ApplicationAttempt) -> None:
        if self._skippable(self.adapter.fill_profile_fields, "profile fields"):
            log.debug("  Filled profile fields")

        for question in self.adapter.extract_screening_questions():
            if not question.label:
                continue
            answer = self.resolver.resolve(question.label, question.options)
            if answer is None:
                continue
            log.info('  "%s" -> "%s"', question.label, answer)
            attempt.answered.append((question.label, answer))
            self._skippable(lambda: self.adapter.apply_answer(question, answer), question.label)

    def _skippable(self, action, what: str) -> bool:
        """Run one form action; a timeout skips just that action."""
        try:
            return bool(action())
        except Exception as exc:
            err = classify_error(exc)
            if not isinstance(err, InteractionTimeout):
                raise
            log.debug("  Skipped %s: %s", what, err)
            return False
