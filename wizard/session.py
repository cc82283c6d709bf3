# wizard/session.py
"""
Questionnaire session state machine.

A session starts in ``selecting_intent`` where contact details are captured,
moves to ``answering`` once a lead type is picked, then ``verifying`` after
the consent-gated submit on the last question, and ``submitted`` once the
backend accepts the payload. ``start_over`` and backing out of the first
question are the only ways back to ``selecting_intent``.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple, Union

import structlog

from wizard.questions import LeadType, Question, Questionnaire, questionnaire_for
from wizard.validation import PersonalInfo

if TYPE_CHECKING:
    from wizard.client import SubmissionClient, SubmissionResult

logger = structlog.get_logger(__name__)

Answer = Union[str, List[str]]

CONSENT_MESSAGE = "Please provide consent to submit your information."


class SessionPhase(str, Enum):
    SELECTING_INTENT = "selecting_intent"
    ANSWERING = "answering"
    VERIFYING = "verifying"
    SUBMITTED = "submitted"


class WizardError(Exception):
    """Base error for actions the current session state does not allow."""


class InvalidTransition(WizardError):
    pass


class PersonalInfoInvalid(WizardError):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(errors.values()))


class IncompleteStep(WizardError):
    pass


class ConsentRequired(WizardError):
    def __init__(self, message: str = CONSENT_MESSAGE):
        super().__init__(message)


class UnknownAnswer(WizardError):
    pass


def is_answered(value: Optional[Answer]) -> bool:
    if isinstance(value, list):
        return len(value) > 0
    return bool(value)


def display_answer(value: Optional[Answer]) -> str:
    if isinstance(value, list):
        return ", ".join(value)
    return value or ""


class WizardSession:
    def __init__(self, personal_info: Optional[PersonalInfo] = None):
        self.personal_info = personal_info or PersonalInfo()
        self.phase = SessionPhase.SELECTING_INTENT
        self.lead_type: Optional[LeadType] = None
        self.step = 0
        self.answers: Dict[str, Answer] = {}
        self.selected: List[str] = []
        self.consent = False
        self.last_error: Optional[str] = None

    # -- derived state -----------------------------------------------------

    @property
    def questionnaire(self) -> Optional[Questionnaire]:
        if self.lead_type is None:
            return None
        return questionnaire_for(self.lead_type)

    @property
    def questions(self) -> Tuple[Question, ...]:
        questionnaire = self.questionnaire
        return questionnaire.questions if questionnaire else ()

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase is not SessionPhase.ANSWERING:
            return None
        return self.questions[self.step]

    @property
    def is_last_step(self) -> bool:
        return bool(self.questions) and self.step == len(self.questions) - 1

    @property
    def progress(self) -> float:
        """Percentage of questions already behind the current step."""
        if not self.questions:
            return 0.0
        return self.step / len(self.questions) * 100

    @property
    def can_advance(self) -> bool:
        question = self.current_question
        if question is None or self.is_last_step:
            return False
        return is_answered(self.answers.get(question.id))

    @property
    def can_submit(self) -> bool:
        question = self.current_question
        if question is None or not self.is_last_step:
            return False
        return self.consent and is_answered(self.answers.get(question.id))

    @property
    def thank_you(self) -> str:
        questionnaire = self.questionnaire
        return questionnaire.thank_you if questionnaire else ""

    # -- contact details and intent ----------------------------------------

    def set_personal_info(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Dict[str, str]:
        """Update any of the contact fields; returns the remaining problems."""
        self._require(SessionPhase.SELECTING_INTENT)
        if name is not None:
            self.personal_info.name = name
        if email is not None:
            self.personal_info.email = email
        if phone_number is not None:
            self.personal_info.phone_number = phone_number
        return self.personal_info.errors()

    def select_lead_type(self, lead_type: Union[LeadType, str]) -> Question:
        self._require(SessionPhase.SELECTING_INTENT)
        errors = self.personal_info.errors()
        if errors:
            raise PersonalInfoInvalid(errors)

        self.lead_type = LeadType(lead_type)
        self.step = 0
        self.answers = {}
        self.selected = []
        self.last_error = None
        self.phase = SessionPhase.ANSWERING
        logger.info("wizard.intent_selected", lead_type=self.lead_type.value)
        return self.questions[0]

    # -- answering ---------------------------------------------------------

    def choose(self, option: str) -> None:
        """Pick an option on the current question.

        Single-select records the option and moves on, except on the last
        question. Multi-select toggles the option and never moves on.
        """
        question = self._current()
        if not question.has_options:
            raise InvalidTransition(f"question {question.id!r} takes free text")
        if option not in question.options:
            raise UnknownAnswer(f"{option!r} is not an option for {question.id!r}")

        if question.multiple:
            chosen = set(self.selected) ^ {option}
            # Option order, not click order.
            self.selected = [o for o in question.options if o in chosen]
            if self.selected:
                self.answers[question.id] = list(self.selected)
            else:
                self.answers.pop(question.id, None)
            return

        self.selected = [option]
        self.answers[question.id] = option
        if not self.is_last_step:
            self._go_to(self.step + 1)

    def enter_text(self, value: str) -> None:
        question = self._current()
        if question.has_options:
            raise InvalidTransition(f"question {question.id!r} takes one of its options")
        self.answers[question.id] = value

    def next(self) -> Question:
        question = self._current()
        if self.is_last_step:
            raise InvalidTransition("last question: submit instead")
        if not is_answered(self.answers.get(question.id)):
            raise IncompleteStep(f"question {question.id!r} has no answer")
        self._go_to(self.step + 1)
        return self.questions[self.step]

    def back(self) -> Optional[Question]:
        """Step back one question, or out to intent selection from the first."""
        question = self._current()
        if self.step == 0:
            self._reset_intent()
            return None

        self.answers.pop(question.id, None)
        self._go_to(self.step - 1)
        return self.questions[self.step]

    def set_consent(self, value: bool) -> None:
        self._require(SessionPhase.ANSWERING)
        self.consent = bool(value)

    def submit(self) -> None:
        question = self._current()
        if not self.is_last_step:
            raise InvalidTransition("submit is only available on the last question")
        if not self.consent:
            raise ConsentRequired()
        if not is_answered(self.answers.get(question.id)):
            raise IncompleteStep(f"question {question.id!r} has no answer")
        self.phase = SessionPhase.VERIFYING
        logger.info("wizard.verifying", lead_type=self.lead_type.value, answers=len(self.answers))

    # -- verifying ---------------------------------------------------------

    def review(self) -> List[Tuple[str, str]]:
        """(label, value) rows for the verification screen."""
        rows = [
            ("Name", self.personal_info.name),
            ("Email", self.personal_info.email),
            ("Phone", self.personal_info.phone_number),
        ]
        rows.extend((q.prompt, display_answer(self.answers.get(q.id))) for q in self.questions)
        return rows

    def edit_answer(self, question_id: str, value: Union[str, Sequence[str]]) -> None:
        self._require(SessionPhase.VERIFYING)
        if self.questionnaire.get(question_id) is None:
            raise UnknownAnswer(f"{question_id!r} is not part of the {self.lead_type.value} questionnaire")
        self.answers[question_id] = value if isinstance(value, str) else list(value)

    def payload(self) -> Dict[str, Any]:
        """Flat request body: contact fields, lead type, then answers."""
        return {
            "name": self.personal_info.name,
            "email": self.personal_info.email,
            "phoneNumber": self.personal_info.phone_number,
            "userType": self.lead_type.value if self.lead_type else None,
            **self.answers,
        }

    async def finalize(self, client: "SubmissionClient") -> "SubmissionResult":
        """Send the lead; only a successful response ends the session."""
        self._require(SessionPhase.VERIFYING)
        result = await client.submit(self.payload())
        if result.success:
            self.phase = SessionPhase.SUBMITTED
            self.last_error = None
            logger.info("wizard.submitted", lead_type=self.lead_type.value)
        else:
            self.last_error = result.message
            logger.warning("wizard.submit_failed", lead_type=self.lead_type.value, error=result.message)
        return result

    def start_over(self) -> None:
        self._reset_intent()
        self.personal_info = PersonalInfo()
        self.last_error = None

    # -- internals ---------------------------------------------------------

    def _require(self, phase: SessionPhase) -> None:
        if self.phase is not phase:
            raise InvalidTransition(f"not allowed while {self.phase.value}")

    def _current(self) -> Question:
        self._require(SessionPhase.ANSWERING)
        return self.questions[self.step]

    def _go_to(self, step: int) -> None:
        self.step = step
        question = self.questions[step]
        recorded = self.answers.get(question.id)
        if isinstance(recorded, list):
            self.selected = list(recorded)
        elif recorded and question.has_options:
            self.selected = [recorded]
        else:
            self.selected = []

    def _reset_intent(self) -> None:
        self.phase = SessionPhase.SELECTING_INTENT
        self.lead_type = None
        self.step = 0
        self.answers = {}
        self.selected = []
        self.consent = False
