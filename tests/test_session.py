import pytest

from wizard.client import SubmissionResult
from wizard.questions import LeadType
from wizard.session import (
    CONSENT_MESSAGE,
    ConsentRequired,
    IncompleteStep,
    InvalidTransition,
    PersonalInfoInvalid,
    SessionPhase,
    UnknownAnswer,
    WizardSession,
)
from wizard.validation import PHONE_ERROR, PersonalInfo


def test_new_session_selects_intent():
    session = WizardSession()
    assert session.phase is SessionPhase.SELECTING_INTENT
    assert session.current_question is None
    assert session.progress == 0.0


def test_lead_type_needs_valid_personal_info():
    session = WizardSession()
    with pytest.raises(PersonalInfoInvalid) as exc_info:
        session.select_lead_type("buy")
    assert set(exc_info.value.errors) == {"name", "email", "phone_number"}
    assert session.phase is SessionPhase.SELECTING_INTENT


def test_set_personal_info_reports_remaining_problems():
    session = WizardSession()
    assert session.set_personal_info(name="Jane", email="jane@example.com") == {
        "phone_number": "Phone number is required"
    }
    assert session.set_personal_info(phone_number="12") == {"phone_number": PHONE_ERROR}
    assert session.set_personal_info(phone_number="416 555 0123") == {}


def test_select_lead_type_starts_answering(make_session):
    session = make_session("sell")
    assert session.phase is SessionPhase.ANSWERING
    assert session.lead_type is LeadType.SELL
    assert session.step == 0
    assert session.current_question.id == "propertyType"
    assert session.answers == {}


def test_unknown_lead_type(personal_info):
    session = WizardSession(personal_info)
    with pytest.raises(ValueError):
        session.select_lead_type("lease")
    assert session.phase is SessionPhase.SELECTING_INTENT


def test_single_select_records_and_advances(make_session):
    session = make_session("rent")
    session.choose("$1500-$2000")
    assert session.answers == {"budget": "$1500-$2000"}
    assert session.step == 1
    assert session.selected == []


def test_multi_select_toggles_without_advancing(make_session):
    session = make_session("buy")
    session.choose("$150,000-$250,000")
    session.choose("$1,000,000+")
    assert session.step == 0
    assert session.answers["budget"] == ["$150,000-$250,000", "$1,000,000+"]
    assert session.can_advance is True

    session.choose("$150,000-$250,000")
    assert session.answers["budget"] == ["$1,000,000+"]

    session.choose("$1,000,000+")
    assert "budget" not in session.answers
    assert session.selected == []
    assert session.can_advance is False


def test_multi_select_keeps_option_order(make_session):
    session = make_session("buy")
    session.choose("$250,000-$350,000")
    session.choose("$150,000-$250,000")
    expected = ["$150,000-$250,000", "$250,000-$350,000"]
    assert session.selected == expected

    session.choose("$150,000-$250,000")
    session.choose("$150,000-$250,000")
    assert session.selected == expected
    assert session.answers["budget"] == expected


def test_choose_rejects_unknown_option(make_session):
    session = make_session("rent")
    with pytest.raises(UnknownAnswer):
        session.choose("$9000")
    assert session.answers == {}


def test_free_text_question(make_session, answer):
    session = make_session("rent")
    for _ in range(3):
        answer(session)
    assert session.current_question.id == "location"

    with pytest.raises(InvalidTransition):
        session.choose("Yes")
    session.enter_text("Toronto, ON")
    assert session.can_advance is True
    session.next()
    assert session.current_question.id == "petFriendly"
    assert session.answers["location"] == "Toronto, ON"


def test_option_question_rejects_text(make_session):
    session = make_session("rent")
    with pytest.raises(InvalidTransition):
        session.enter_text("cheap")


def test_next_needs_an_answer(make_session):
    session = make_session("buy")
    with pytest.raises(IncompleteStep):
        session.next()
    assert session.step == 0


@pytest.mark.parametrize("lead_type", list(LeadType))
def test_progress_tracks_step(make_session, answer, lead_type):
    session = make_session(lead_type)
    total = len(session.questions)
    for step in range(total):
        assert session.step == step
        assert session.progress == pytest.approx(step / total * 100)
        if step < total - 1:
            answer(session)
    assert session.progress < 100


def test_back_clears_current_answer_and_restores_selection(make_session):
    session = make_session("buy")
    session.choose("$250,000-$350,000")
    session.choose("$350,000-$450,000")
    session.next()
    session.choose("Duplex")

    session.back()

    assert session.step == 0
    assert "homeType" not in session.answers
    assert session.selected == ["$250,000-$350,000", "$350,000-$450,000"]
    assert session.answers["budget"] == ["$250,000-$350,000", "$350,000-$450,000"]


def test_back_restores_single_select(make_session):
    session = make_session("rent")
    session.choose("Under $1000")
    session.back()
    assert session.step == 0
    assert session.selected == ["Under $1000"]
    assert session.answers == {"budget": "Under $1000"}


def test_back_from_first_question_returns_to_intent(make_session, personal_info):
    session = make_session("buy")
    session.choose("$1,000,000+")
    session.back()

    assert session.phase is SessionPhase.SELECTING_INTENT
    assert session.lead_type is None
    assert session.answers == {}
    assert session.personal_info == personal_info

    session.select_lead_type("rent")
    assert session.current_question.id == "budget"


def test_last_question_does_not_advance(make_session, answer):
    session = make_session("sell")
    while not session.is_last_step:
        answer(session)
    session.choose("No")
    assert session.is_last_step
    assert session.answers["agentContract"] == "No"
    assert session.can_advance is False
    with pytest.raises(InvalidTransition):
        session.next()


def test_submit_requires_consent(make_session, answer):
    session = make_session("sell")
    while not session.is_last_step:
        answer(session)
    session.choose("Yes")

    assert session.can_submit is False
    with pytest.raises(ConsentRequired) as exc_info:
        session.submit()
    assert str(exc_info.value) == CONSENT_MESSAGE
    assert session.phase is SessionPhase.ANSWERING

    session.set_consent(True)
    assert session.can_submit is True
    session.submit()
    assert session.phase is SessionPhase.VERIFYING


def test_submit_requires_last_answer(make_session, answer):
    session = make_session("rent")
    while not session.is_last_step:
        answer(session)
    session.set_consent(True)
    with pytest.raises(IncompleteStep):
        session.submit()


def test_submit_only_on_last_question(make_session):
    session = make_session("rent")
    session.set_consent(True)
    with pytest.raises(InvalidTransition):
        session.submit()


def test_payload_is_flat(verifying_session):
    session = verifying_session("rent")
    payload = session.payload()
    assert list(payload)[:4] == ["name", "email", "phoneNumber", "userType"]
    assert payload["userType"] == "rent"
    assert payload["name"] == "Jane Doe"
    assert payload["phoneNumber"] == "(416) 555-0123"
    assert payload["location"] == "Austin, TX"
    assert set(payload) - {"name", "email", "phoneNumber", "userType"} == set(session.questionnaire.ids())


def test_review_lists_contact_details_then_answers(verifying_session):
    session = verifying_session("buy")
    rows = session.review()
    assert rows[:3] == [
        ("Name", "Jane Doe"),
        ("Email", "jane@example.com"),
        ("Phone", "(416) 555-0123"),
    ]
    assert len(rows) == 3 + 8
    assert rows[3] == ("What is your budget for buying a home? (Select all that apply)", "$150,000-$250,000")


def test_edit_answer_while_verifying(verifying_session):
    session = verifying_session("buy")
    session.edit_answer("homeType", ("Duplex", "Bungalow"))
    session.edit_answer("location", "Ottawa")
    assert session.answers["homeType"] == ["Duplex", "Bungalow"]
    assert session.answers["location"] == "Ottawa"

    with pytest.raises(UnknownAnswer):
        session.edit_answer("petFriendly", "Yes")


def test_edit_answer_only_while_verifying(make_session):
    session = make_session("buy")
    with pytest.raises(InvalidTransition):
        session.edit_answer("location", "Ottawa")


@pytest.mark.asyncio
async def test_finalize_success(verifying_session, fake_submission):
    session = verifying_session("sell")
    client = fake_submission()

    result = await session.finalize(client)

    assert result.success is True
    assert session.phase is SessionPhase.SUBMITTED
    assert client.payloads == [session.payload()]
    assert "selling" in session.thank_you


@pytest.mark.asyncio
async def test_finalize_failure_stays_verifying(verifying_session, fake_submission):
    session = verifying_session("buy")
    client = fake_submission(
        SubmissionResult(success=False, message="Internal Server Error", status_code=500),
        SubmissionResult(success=True, message="Submitted"),
    )

    result = await session.finalize(client)
    assert result.success is False
    assert session.phase is SessionPhase.VERIFYING
    assert session.last_error == "Internal Server Error"

    result = await session.finalize(client)
    assert result.success is True
    assert session.phase is SessionPhase.SUBMITTED
    assert session.last_error is None
    assert len(client.payloads) == 2


@pytest.mark.asyncio
async def test_finalize_before_verifying_is_rejected(make_session, fake_submission):
    session = make_session("buy")
    with pytest.raises(InvalidTransition):
        await session.finalize(fake_submission())


@pytest.mark.asyncio
async def test_start_over_clears_everything(verifying_session, fake_submission):
    session = verifying_session("rent")
    await session.finalize(fake_submission())

    session.start_over()

    assert session.phase is SessionPhase.SELECTING_INTENT
    assert session.lead_type is None
    assert session.answers == {}
    assert session.consent is False
    assert session.personal_info == PersonalInfo()
