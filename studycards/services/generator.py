"""Flashcard proposal generation.

``ProposalGenerator`` is the seam callers depend on: text in, a suggested
folder name and a list of proposals out. ``MockProposalGenerator`` is the only
implementation for now and derives its proposals from superficial statistics
of the text instead of calling a model.
"""

import asyncio
import logging
import re
from typing import Protocol

from studycards.core.config import settings
from studycards.schemas.flashcard import FlashcardProposal, GenerateFlashcardsResponse

logger = logging.getLogger(__name__)

FOLDER_NAME_WORDS = 3
FOLDER_NAME_MAX_PREFIX = 30
KEY_POINT_MAX_LENGTH = 200
MIN_PROPOSALS = 2


class ProposalGenerator(Protocol):
    async def generate(self, text: str) -> GenerateFlashcardsResponse: ...


class MockProposalGenerator:
    """Stand-in generator with simulated latency."""

    def __init__(self, delay_seconds: float = None):
        if delay_seconds is None:
            delay_seconds = settings.GENERATION_DELAY_SECONDS
        self.delay_seconds = delay_seconds

    async def generate(self, text: str) -> GenerateFlashcardsResponse:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        result = build_mock_proposals(text)
        logger.debug("Mock generator produced %d proposals", len(result.flashcards_proposals))
        return result


def suggest_folder_name(text: str) -> str:
    first_words = " ".join(text.split()[:FOLDER_NAME_WORDS])
    if len(first_words) > FOLDER_NAME_MAX_PREFIX:
        return f"{first_words[:FOLDER_NAME_MAX_PREFIX]}..."
    return f"Study Notes - {first_words}"


def build_mock_proposals(text: str) -> GenerateFlashcardsResponse:
    words = text.split()
    word_count = len(words)
    first_words = " ".join(words[:FOLDER_NAME_WORDS])

    proposals = [
        FlashcardProposal(
            front="What is the approximate length of the provided text?",
            back=f"The text contains approximately {word_count} words and {len(text)} characters.",
        )
    ]

    if word_count > 20:
        proposals.append(
            FlashcardProposal(
                front="What is the main topic discussed in this text?",
                back=f"Based on the content analysis, the text appears to discuss: {first_words}",
            )
        )

    if word_count > 50:
        sentences = [s for s in re.split(r"[.!?]+", text) if len(s.strip()) > 10]
        if len(sentences) > 1:
            key_point = sentences[0].strip()
            if len(key_point) > KEY_POINT_MAX_LENGTH:
                key_point = f"{key_point[:KEY_POINT_MAX_LENGTH]}..."
            proposals.append(
                FlashcardProposal(
                    front="What is one of the key points mentioned in the text?",
                    back=key_point,
                )
            )

    if len(proposals) < MIN_PROPOSALS:
        proposals.append(
            FlashcardProposal(
                front="What type of content was provided for flashcard generation?",
                back="The content appears to be educational or informational text suitable for creating study materials.",
            )
        )

    return GenerateFlashcardsResponse(
        suggested_folder_name=suggest_folder_name(text),
        flashcards_proposals=proposals,
    )
