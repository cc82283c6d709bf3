# cli/terminal.py
"""
Interactive terminal front-end for the lead questionnaire.

Everything the user types goes through ``read`` and everything shown goes
through ``write`` so a scripted conversation can drive a whole session.
Commands start with ":"; a bare number picks an option and any other text
answers a free-text question.
"""
from __future__ import annotations

from typing import Callable, List, Optional

from wizard.client import SubmissionClient
from wizard.questions import LeadType
from wizard.session import (
    SessionPhase,
    WizardError,
    WizardSession,
    display_answer,
)

QUIT = ":q"
BAR_WIDTH = 20

SUBMIT_FAILED = "There was an error submitting your form. Please try again."
CONFIRMATION = "A confirmation email has been sent to your provided email address with further details."


class _Quit(Exception):
    pass


def progress_bar(percent: float, width: int = BAR_WIDTH) -> str:
    filled = int(round(percent / 100 * width))
    return f"[{'#' * filled}{'.' * (width - filled)}] {percent:3.0f}%"


class TerminalWizard:
    def __init__(
        self,
        session: WizardSession,
        client: SubmissionClient,
        *,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ):
        self.session = session
        self.client = client
        self._read = read
        self.write = write

    def read(self, prompt: str) -> str:
        try:
            line = self._read(prompt)
        except EOFError:
            raise _Quit()
        if line.strip() == QUIT:
            raise _Quit()
        return line

    async def run(self) -> SessionPhase:
        """Drive the session until the user quits or leaves the thank-you screen."""
        screens = {
            SessionPhase.SELECTING_INTENT: self._select_intent,
            SessionPhase.ANSWERING: self._answer,
            SessionPhase.VERIFYING: self._verify,
            SessionPhase.SUBMITTED: self._submitted,
        }
        try:
            while True:
                if not await screens[self.session.phase]():
                    break
        except _Quit:
            self.write("Goodbye.")
        return self.session.phase

    # -- screens -----------------------------------------------------------

    async def _select_intent(self) -> bool:
        info = self.session.personal_info
        if not info.is_valid:
            self.write("Enter Your Information Below To Get Access to Exclusive Listings")
        while not info.name:
            self.session.set_personal_info(name=self.read("Full Name: ").strip())
        while not info.email:
            self.session.set_personal_info(email=self.read("Email Address: ").strip())
        while "phone_number" in info.errors():
            self.session.set_personal_info(phone_number=self.read("Phone Number: ").strip())
            if info.phone_error:
                self.write(info.phone_error)

        choices = "/".join(t.value for t in LeadType)
        answer = self.read(f"What would you like to do? [{choices}] ").strip().lower()
        try:
            self.session.select_lead_type(answer)
        except ValueError:
            self.write(f"Please choose one of: {choices}")
        return True

    async def _answer(self) -> bool:
        session = self.session
        question = session.current_question

        self.write("")
        self.write(question.prompt)
        self.write(progress_bar(session.progress))
        for number, option in enumerate(question.options, start=1):
            marker = "*" if option in session.selected else " "
            self.write(f"  {marker} {number}. {option}")
        if not question.has_options:
            current = session.answers.get(question.id)
            if current:
                self.write(f"  Current answer: {current}")

        hints = [":b back"]
        if session.is_last_step:
            consent = "x" if session.consent else " "
            self.write(f"  [{consent}] I consent to submitting my information and agree to the Privacy Policy.")
            hints += [":c toggle consent", ":s submit"]
        else:
            hints.append(":n next")
        hints.append(":q quit")

        line = self.read(f"({', '.join(hints)}) > ")
        command = line.strip()
        try:
            if command == ":b":
                session.back()
            elif command == ":n":
                session.next()
            elif command == ":c" and session.is_last_step:
                session.set_consent(not session.consent)
            elif command == ":s" and session.is_last_step:
                session.submit()
            elif command.startswith(":"):
                self.write(f"Unknown command {command}")
            elif question.has_options:
                self._choose_numbered(command, question.options)
            else:
                session.enter_text(line.strip())
        except WizardError as e:
            self.write(str(e))
        return True

    async def _verify(self) -> bool:
        session = self.session
        self.write("")
        self.write("Verify Your Information")
        rows = session.review()
        for label, value in rows[:3]:
            self.write(f"  {label}: {value}")
        for number, (label, value) in enumerate(rows[3:], start=1):
            self.write(f"  {number}. {label} {value}")

        command = self.read("(:e N edit answer, :s send, :q quit) > ").strip()
        if command == ":s":
            result = await session.finalize(self.client)
            if not result.success:
                self.write(f"{SUBMIT_FAILED} {result.message}")
        elif command.startswith(":e"):
            self._edit(command[2:].strip())
        else:
            self.write("Unknown command")
        return True

    async def _submitted(self) -> bool:
        self.write("")
        self.write("Thank You!")
        self.write(self.session.thank_you)
        self.write(CONFIRMATION)
        command = self.read("(:r start over, :q quit) > ").strip()
        if command == ":r":
            self.session.start_over()
            return True
        return False

    # -- helpers -----------------------------------------------------------

    def _choose_numbered(self, command: str, options: tuple) -> None:
        if not command.isdigit() or not 1 <= int(command) <= len(options):
            self.write(f"Choose an option between 1 and {len(options)}")
            return
        self.session.choose(options[int(command) - 1])

    def _edit(self, argument: str) -> None:
        questions = self.session.questions
        if not argument.isdigit() or not 1 <= int(argument) <= len(questions):
            self.write(f"Choose an answer between 1 and {len(questions)}")
            return

        question = questions[int(argument) - 1]
        current = display_answer(self.session.answers.get(question.id))
        value = self.read(f"{question.prompt} [{current}] ").strip()
        if not value:
            return
        if question.multiple:
            self.session.edit_answer(question.id, _split_list(value, question.options))
        else:
            self.session.edit_answer(question.id, value)


def _split_list(value: str, options: tuple) -> List[str]:
    """Option numbers ("1, 3") or the displayed ", "-joined text."""
    numbers = value.replace(",", " ").split()
    if numbers and all(n.isdigit() and 1 <= int(n) <= len(options) for n in numbers):
        return [options[int(n) - 1] for n in numbers]
    return [item.strip() for item in value.split(", ") if item.strip()]


def make_wizard(url: str, timeout: Optional[float] = None) -> TerminalWizard:
    return TerminalWizard(WizardSession(), SubmissionClient(url, timeout=timeout))
