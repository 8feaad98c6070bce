import pytest

from applier.models import NOT_LISTED, Job, QuestionKind, ScreeningQuestion, WorkType, classify_work_type


@pytest.mark.parametrize("raw, title, expected", [
    ("Full time", "Remote Python Developer", WorkType.REMOTE),
    ("Hybrid", "Developer", WorkType.HYBRID),
    ("", "Developer (onsite)", WorkType.ON_SITE),
    ("Work in office 3 days", "Developer", WorkType.ON_SITE),
    ("Contract/Temp", "Developer", "Contract/Temp"),
    ("", "Developer", WorkType.UNSPECIFIED),
])
def test_classify_work_type(raw, title, expected):
    assert classify_work_type(raw, title) == expected


def test_job_dict_uses_stored_field_names():
    job = Job(title="Dev", company="Acme", location="Perth", url="https://x.com/job/1",
              work_type=WorkType.REMOTE, applied=True, applied_at="2026-01-02T03:04:05+00:00",
              keyword="dev")
    d = job.to_dict()
    assert d["workType"] == "Remote"
    assert d["appliedAt"] == "2026-01-02T03:04:05+00:00"
    assert Job.from_dict(d) == job


def test_job_from_sparse_dict():
    job = Job.from_dict({"url": "https://x.com/job/1", "title": "Dev"})
    assert job.salary == NOT_LISTED
    assert job.applied is False
    assert job.applied_at is None
    assert "appliedAt" not in job.to_dict()


def test_screening_question_from_raw():
    q = ScreeningQuestion.from_raw({"label": "  Visa Status ", "type": "select",
                                    "options": ["", "Citizen", "Visa"], "id": "q7"})
    assert q.label == "visa status"
    assert q.kind is QuestionKind.SELECT
    assert q.options == ["Citizen", "Visa"]
    assert q.locator == "q7"


def test_unknown_input_kind_treated_as_text():
    q = ScreeningQuestion.from_raw({"label": "x", "type": "range"})
    assert q.kind is QuestionKind.TEXT
