# wizard/questions.py
"""
Questionnaires per lead type.

Each lead type maps to an ordered tuple of questions plus the copy shown once
the lead has been submitted. Adding a question means adding data here; the
session code never branches on the lead type.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class LeadType(str, Enum):
    BUY = "buy"
    SELL = "sell"
    RENT = "rent"


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    options: Tuple[str, ...] = ()
    free_text: bool = False
    multiple: bool = False

    @property
    def has_options(self) -> bool:
        return bool(self.options)


@dataclass(frozen=True)
class Questionnaire:
    lead_type: LeadType
    questions: Tuple[Question, ...]
    thank_you: str

    def __len__(self) -> int:
        return len(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]

    def ids(self) -> Tuple[str, ...]:
        return tuple(q.id for q in self.questions)

    def get(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


TIMELINE = ("ASAP", "Within 1 month", "1-3 months", "3-6 months", "6+ months")
BATHROOMS = ("1", "1.5", "2", "2.5", "3+")
YES_NO = ("Yes", "No")

AGENT_CONTRACT = Question(
    "agentContract",
    "Are you currently under contract with a real estate agent?",
    YES_NO,
)

BUY = Questionnaire(
    LeadType.BUY,
    (
        Question(
            "budget",
            "What is your budget for buying a home? (Select all that apply)",
            (
                "$150,000-$250,000",
                "$250,000-$350,000",
                "$350,000-$450,000",
                "$450,000-$550,000",
                "$550,000-$650,000",
                "$650,000-$750,000",
                "$750,000-$850,000",
                "$850,000-$950,000",
                "$1,000,000+",
            ),
            multiple=True,
        ),
        Question(
            "homeType",
            "What type of home are you interested in? (Select all that apply)",
            (
                "Single Family",
                "Semi-Detached",
                "Townhouse",
                "Condo/Apartment",
                "Duplex",
                "Bungalow",
                "Split-Level",
                "Cottage/Cabin",
                "Two Apartment",
                "Luxury Estate",
            ),
            multiple=True,
        ),
        Question("bedrooms", "How many bedrooms are you looking for?", ("1", "2", "3", "4", "5+")),
        Question("bathrooms", "How many bathrooms do you need?", BATHROOMS),
        Question("location", "What is your preferred location?", free_text=True),
        Question("timeline", "When are you looking to move in?", TIMELINE),
        Question(
            "preApproval",
            "Have you been pre-approved for a mortgage?",
            ("Yes", "No", "Not yet, but I'm working on it"),
        ),
        AGENT_CONTRACT,
    ),
    thank_you=(
        "We appreciate your interest in buying a home. Our team will review your "
        "preferences and get back to you soon with personalized recommendations."
    ),
)

SELL = Questionnaire(
    LeadType.SELL,
    (
        Question(
            "propertyType",
            "What type of property are you selling?",
            ("Single-Family Home", "Condo", "Townhouse", "Multi-Family Home", "Other"),
        ),
        Question("bedrooms", "How many bedrooms does your property have?", ("1", "2", "3", "4", "5+")),
        Question("bathrooms", "How many bathrooms does your property have?", BATHROOMS),
        Question("location", "Where is your property located?", free_text=True),
        Question("timeline", "When are you looking to sell?", TIMELINE),
        Question(
            "reason",
            "What is your primary reason for selling?",
            ("Upgrading", "Downsizing", "Relocating", "Investment", "Other"),
        ),
        AGENT_CONTRACT,
    ),
    thank_you=(
        "Thank you for providing information about your property. Our team will "
        "analyze the details and contact you shortly to discuss potential selling "
        "opportunities."
    ),
)

RENT = Questionnaire(
    LeadType.RENT,
    (
        Question(
            "budget",
            "What is your monthly budget for rent?",
            ("Under $1000", "$1000-$1500", "$1500-$2000", "$2000-$2500", "$2500+"),
        ),
        Question("bedrooms", "How many bedrooms are you looking for?", ("Studio", "1", "2", "3", "4+")),
        Question("bathrooms", "How many bathrooms do you need?", BATHROOMS),
        Question("location", "What is your preferred location?", free_text=True),
        Question("petFriendly", "Do you need a pet-friendly rental?", YES_NO),
        Question("timeline", "When do you need to move in?", TIMELINE),
        AGENT_CONTRACT,
    ),
    thank_you=(
        "We appreciate your interest in renting a home. Our team will review your "
        "preferences and get back to you soon with personalized recommendations."
    ),
)

QUESTIONNAIRES: Dict[LeadType, Questionnaire] = {
    LeadType.BUY: BUY,
    LeadType.SELL: SELL,
    LeadType.RENT: RENT,
}


def questionnaire_for(lead_type: Union[LeadType, str]) -> Questionnaire:
    """Look up a questionnaire; raises ValueError for an unknown lead type."""
    return QUESTIONNAIRES[LeadType(lead_type)]
