"""Application flow controller against a scripted adapter."""
import pytest

from applier.errors import IllegalTransition
from applier.flow import MAX_STEPS, ApplicationFlowController
from applier.models import FlowState, ScreeningQuestion


def _q(label, kind="text", options=None):
    return ScreeningQuestion.from_raw({"label": label, "type": kind, "options": options or [], "id": "q"})


def test_step_ceiling_abandons_after_eight_steps(scripted, resolver, job):
    adapter = scripted(continue_steps="always")
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is False
    assert adapter.names().count("continue?") == MAX_STEPS == 8
    assert "submit?" not in adapter.names()
    assert controller.last_attempt.step == 8
    assert controller.last_attempt.state is FlowState.ABANDONED


def test_continue_is_clicked_before_submit(scripted, resolver, job):
    adapter = scripted(continue_steps={1}, submit_steps="always")
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is True
    assert ("continue?", 1) in adapter.calls
    assert ("submit?", 1) not in adapter.calls
    assert ("submit?", 2) in adapter.calls


def test_submit_counts_without_confirmation(scripted, resolver, job):
    adapter = scripted(submit_steps={1}, confirm=False)
    controller = ApplicationFlowController(adapter, resolver, confirm_timeout_ms=50)

    assert controller.run(job) is True
    assert ("wait", 50) in adapter.calls
    assert controller.last_attempt.state is FlowState.SUBMITTED


def test_missing_apply_trigger_skips_job(scripted, resolver, job):
    adapter = scripted(apply_found=False)
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is False
    assert "complete?" not in adapter.names()
    assert controller.last_attempt.reason == "No Apply button found"


def test_completion_signal_already_present(scripted, resolver, job):
    adapter = scripted(complete_steps={1})
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is True
    assert "cover" not in adapter.names()
    assert "submit?" not in adapter.names()


def test_completion_detected_on_later_step(scripted, resolver, job):
    adapter = scripted(continue_steps={1, 2}, complete_steps={3})
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is True
    assert controller.last_attempt.step == 3


def test_no_actionable_control_abandons(scripted, resolver, job):
    adapter = scripted()
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is False
    assert controller.last_attempt.step == 1
    assert controller.last_attempt.reason == "No actionable button found"


def test_step_order_within_an_iteration(scripted, resolver, job):
    adapter = scripted(submit_steps={1})
    ApplicationFlowController(adapter, resolver).run(job)

    names = adapter.names()
    assert names.index("complete?") < names.index("cover") < names.index("reveal")
    assert names.index("reveal") < names.index("continue?") < names.index("submit?")


def test_questions_are_resolved_and_applied(scripted, resolver, store, job):
    questions = {1: [
        _q("do you have the right to work in australia?", "radio", ["Yes", "No"]),
        _q("what is your favourite colour?"),
        _q(""),
        _q("are you happy to travel?", "select", ["No", "Yes"]),
    ]}
    adapter = scripted(questions=questions, submit_steps={1})
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is True
    assert adapter.applied == [
        ("do you have the right to work in australia?", "Yes"),
        ("are you happy to travel?", "Yes"),
    ]
    assert store.get("are you happy to travel?") == "Yes"
    assert "what is your favourite colour?" not in store
    assert len(controller.last_attempt.answered) == 2


@pytest.mark.parametrize("exc", [
    RuntimeError("Target page, context or browser has been closed"),
    RuntimeError("something odd happened"),
])
def test_interaction_errors_become_abandoned(scripted, resolver, job, exc):
    adapter = scripted(fail_on={"extract": exc}, submit_steps="always")
    controller = ApplicationFlowController(adapter, resolver)

    assert controller.run(job) is False
    assert controller.last_attempt.state is FlowState.ABANDONED
    assert controller.last_attempt.reason


def test_navigation_failure_is_not_propagated(scripted, resolver, job):
    adapter = scripted(fail_on={"open": TimeoutError("goto timed out")})
    assert ApplicationFlowController(adapter, resolver).run(job) is False


def test_transition_table_rejects_leaving_terminal_state(scripted, resolver, job):
    controller = ApplicationFlowController(scripted(), resolver)
    controller.run(job)
    with pytest.raises(IllegalTransition):
        controller._transition(controller.last_attempt, FlowState.STEP_LOOP)
