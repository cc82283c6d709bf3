# cli/cli.py
"""
CLI registry and dispatcher for the lead form.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import traceback
from typing import Callable, Dict, Optional

import structlog
import uvicorn

from api.core.config import settings
from cli.terminal import make_wizard
from cli.verification import check_api_health
from wizard.questions import LeadType, questionnaire_for
from wizard.session import SessionPhase


def _supports_color() -> bool:
    if sys.platform == "win32":
        return os.getenv("TERM") == "xterm" or os.getenv("ANSICON") is not None
    return sys.stdout.isatty()


SUPPORTS_COLOR = _supports_color()

_COLORS = {"green": "\033[92m", "red": "\033[91m", "yellow": "\033[93m", "blue": "\033[94m"}
_RESET = "\033[0m"


def _status(symbol: str, color: str, message: str) -> None:
    if SUPPORTS_COLOR:
        symbol = f"{_COLORS[color]}{symbol}{_RESET}"
    print(f"{symbol} {message}")


def print_success(message: str):
    _status("[✓]", "green", message)


def print_error(message: str):
    _status("[✗]", "red", message)


def print_warning(message: str):
    _status("[!]", "yellow", message)


def print_info(message: str):
    _status("[i]", "blue", message)


# Command functions
async def cmd_wizard(args: argparse.Namespace) -> int:
    """Command: Fill in the questionnaire interactively."""
    # Only warnings while prompting.
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING))
    print_info(f"Submitting to {args.url}")
    wizard = make_wizard(args.url, timeout=args.timeout)
    phase = await wizard.run()

    if phase is SessionPhase.SUBMITTED:
        print_success("Lead submitted")
        return 0
    print_warning("Questionnaire not submitted")
    return 1


async def cmd_questions(args: argparse.Namespace) -> int:
    """Command: Print the questionnaire for a lead type."""
    questionnaire = questionnaire_for(args.lead_type)
    print_info(f"{args.lead_type}: {len(questionnaire)} questions")
    for number, question in enumerate(questionnaire.questions, start=1):
        kind = "multiple" if question.multiple else ("text" if question.free_text else "single")
        print(f"  {number}. [{question.id}] {question.prompt} ({kind})")
        for option in question.options:
            print(f"       - {option}")
    return 0


async def cmd_check_api(args: argparse.Namespace) -> int:
    """Command: Verify API is up and Google Sheets is ready."""
    print_info("Checking API health...")
    result = await check_api_health(api_url=args.api_url, api_prefix=settings.api_prefix)

    if result.success:
        print_success(result.message)
        return 0
    print_error(result.message)
    return 1


async def cmd_serve(args: argparse.Namespace) -> int:
    """Command: Run the submit-form API."""
    print_info(f"Serving on {args.host}:{args.port}")
    server = uvicorn.Server(uvicorn.Config("api.main:app", host=args.host, port=args.port))
    await server.serve()
    return 0


# Command registry
COMMANDS: Dict[str, Callable] = {
    'wizard': cmd_wizard,
    'questions': cmd_questions,
    'check-api': cmd_check_api,
    'serve': cmd_serve,
}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        description='Lead form CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    wizard_parser = subparsers.add_parser('wizard', help='Fill in the questionnaire')
    wizard_parser.add_argument('--url', default=settings.submit_url, help='submit-form endpoint URL')
    wizard_parser.add_argument('--timeout', type=float, default=settings.submit_timeout_seconds,
                               help='Request timeout in seconds (default: none)')

    questions_parser = subparsers.add_parser('questions', help='List questions for a lead type')
    questions_parser.add_argument('lead_type', choices=[t.value for t in LeadType])

    check_parser = subparsers.add_parser('check-api', help='Verify API and Sheets readiness')
    check_parser.add_argument('--api-url', default='http://localhost:8000', help='API URL')

    serve_parser = subparsers.add_parser('serve', help='Run the API server')
    serve_parser.add_argument('--host', default=settings.api_host)
    serve_parser.add_argument('--port', type=int, default=settings.api_port)

    return parser


def main(args: Optional[list] = None) -> int:
    """Entry point for the ``lead-form`` script."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    command_func = COMMANDS.get(parsed_args.command)
    if command_func is None:
        parser.print_help()
        return 1

    try:
        return asyncio.run(command_func(parsed_args))
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except Exception as e:
        print_error(f"{parsed_args.command} failed: {e}")
        if os.getenv("DEBUG"):
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
