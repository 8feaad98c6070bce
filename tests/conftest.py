import os
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("APPLIER_NO_LOG_FILE", "1")

from applier.adapters.base import PlatformAdapter  # noqa: E402
from applier.answers import AnswerResolver, AnswerStore  # noqa: E402
from applier.models import Job  # noqa: E402


class ScriptedAdapter(PlatformAdapter):
    """Adapter whose page behaviour is scripted per step, for flow tests."""

    platform = "fake"

    def __init__(self, *, apply_found=True, continue_steps=None, submit_steps=None,
                 complete_steps=None, questions=None, confirm=True, fail_on=None):
        super().__init__(MagicMock(), {})
        self.apply_found = apply_found
        self.continue_steps = continue_steps if continue_steps is not None else set()
        self.submit_steps = submit_steps if submit_steps is not None else set()
        self.complete_steps = complete_steps or set()
        self.questions = questions or {}
        self.confirm = confirm
        self.fail_on = fail_on or {}
        self.step = 0
        self.calls: list[tuple] = []
        self.applied: list[tuple[str, str]] = []

    def _maybe_fail(self, name):
        if name in self.fail_on:
            raise self.fail_on[name]

    def login(self):
        return True

    def search(self):
        return []

    def open_job(self, job):
        self.calls.append(("open", job.url))
        self._maybe_fail("open")

    def find_apply_trigger(self):
        self.calls.append(("apply",))
        return self.apply_found

    def detect_completion_signal(self):
        self.step += 1
        self.calls.append(("complete?", self.step))
        return self.step in self.complete_steps

    def skip_cover_letter(self):
        self.calls.append(("cover", self.step))
        return False

    def extract_screening_questions(self):
        self._maybe_fail("extract")
        return list(self.questions.get(self.step, []))

    def apply_answer(self, question, answer):
        self.applied.append((question.label, answer))
        return True

    def reveal(self):
        self.calls.append(("reveal", self.step))

    def find_continue_trigger(self):
        self.calls.append(("continue?", self.step))
        if self.continue_steps == "always":
            return True
        return self.step in self.continue_steps

    def find_submit_trigger(self):
        self.calls.append(("submit?", self.step))
        return self.submit_steps == "always" or self.step in self.submit_steps

    def wait_for_completion(self, timeout_ms=15_000):
        self.calls.append(("wait", timeout_ms))
        return self.confirm

    def pause(self, ms):
        pass

    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def job():
    return Job(
        title="Junior Developer",
        company="Acme",
        location="Sydney NSW",
        url="https://www.seek.com.au/job/123",
        work_type="Hybrid",
        salary="$70k",
        keyword="developer",
    )


@pytest.fixture
def store(tmp_path):
    return AnswerStore.load(tmp_path / "saved-answers.json")


@pytest.fixture
def resolver(store):
    return AnswerResolver(store)


@pytest.fixture
def scripted():
    return ScriptedAdapter
