# tests/conftest.py
import os

os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from fastapi.testclient import TestClient

from api.services.sheets import SheetsClient
from wizard.client import SubmissionResult
from wizard.session import WizardSession
from wizard.validation import PersonalInfo

SHEET_IDS = {"buy": "sheet-buy", "sell": "sheet-sell", "rent": "sheet-rent"}


class RecordingSheetsClient(SheetsClient):
    """SheetsClient whose spreadsheet calls are captured instead of sent."""

    def __init__(self, fail: bool = False, ready: bool = True):
        super().__init__("{}", SHEET_IDS)
        self.appended = []
        self.fail = fail
        if ready:
            self._gc = object()
        else:
            self._init_error = "No key could be detected."

    def _append(self, sheet_id, values):
        if self.fail:
            raise RuntimeError("quota exceeded")
        self.appended.append((sheet_id, values))
        return {"spreadsheetId": sheet_id, "updates": {"updatedRows": len(values)}}


class FakeSubmissionClient:
    def __init__(self, *results):
        self.results = list(results) or [SubmissionResult(success=True, message="Submitted")]
        self.payloads = []

    async def submit(self, payload):
        self.payloads.append(dict(payload))
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


@pytest.fixture
def sheets():
    return RecordingSheetsClient()


@pytest.fixture
def api_client(sheets):
    from api.main import app

    app.state.sheets_client = sheets
    yield TestClient(app)
    app.state.sheets_client = None


@pytest.fixture
def personal_info():
    return PersonalInfo(name="Jane Doe", email="jane@example.com", phone_number="(416) 555-0123")


@pytest.fixture
def make_session(personal_info):
    def _make(lead_type="buy"):
        session = WizardSession(personal_info)
        session.select_lead_type(lead_type)
        return session
    return _make


def answer_current(session):
    """Give the current question its first option (or a location) and move on."""
    question = session.current_question
    if question.free_text:
        session.enter_text("Austin, TX")
    elif question.multiple:
        session.choose(question.options[0])
    else:
        session.choose(question.options[0])
        return
    if not session.is_last_step:
        session.next()


@pytest.fixture
def verifying_session(make_session):
    def _make(lead_type="buy"):
        session = make_session(lead_type)
        while not session.is_last_step:
            answer_current(session)
        answer_current(session)
        session.set_consent(True)
        session.submit()
        return session
    return _make


@pytest.fixture
def answer():
    return answer_current


@pytest.fixture
def make_sheets():
    return RecordingSheetsClient


@pytest.fixture
def fake_submission():
    return FakeSubmissionClient
