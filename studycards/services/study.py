from typing import List, Optional

from studycards.schemas.flashcard import FlashcardResponse

STUDYING = "studying"
FINISHED = "finished"


class StudySession:
    """Walks through a drawn deck once, counting the cards the user knew."""

    def __init__(self, flashcards: List[FlashcardResponse]):
        self.flashcards = list(flashcards)
        self.restart()

    def restart(self) -> None:
        self.current_index = 0
        self.known_count = 0
        self.status = STUDYING if self.flashcards else FINISHED

    @property
    def current(self) -> Optional[FlashcardResponse]:
        if self.status != STUDYING:
            return None
        return self.flashcards[self.current_index]

    def mark_known(self) -> None:
        self._advance(known=True)

    def mark_unknown(self) -> None:
        self._advance(known=False)

    @property
    def score_percent(self) -> int:
        if not self.flashcards:
            return 0
        return round(self.known_count / len(self.flashcards) * 100)

    def _advance(self, known: bool) -> None:
        if self.status != STUDYING:
            return
        if known:
            self.known_count += 1
        self.current_index += 1
        if self.current_index >= len(self.flashcards):
            self.status = FINISHED
