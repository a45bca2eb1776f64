from datetime import datetime, timezone

from studycards.schemas.flashcard import FlashcardResponse
from studycards.services.study import FINISHED, STUDYING, StudySession


def _card(i):
    now = datetime.now(timezone.utc)
    return FlashcardResponse(
        id=f"00000000-0000-0000-0000-00000000000{i}",
        front=f"Q{i}",
        back=f"A{i}",
        folder_id="00000000-0000-0000-0000-00000000000f",
        generation_source="manual",
        created_at=now,
        updated_at=now,
    )


def test_session_counts_known_cards_and_finishes():
    session = StudySession([_card(1), _card(2), _card(3)])
    assert session.status == STUDYING
    assert session.current.front == "Q1"

    session.mark_known()
    session.mark_unknown()
    session.mark_known()

    assert session.status == FINISHED
    assert session.current is None
    assert session.known_count == 2
    assert session.score_percent == 67


def test_marking_after_finish_is_ignored_and_restart_resets():
    session = StudySession([_card(1)])
    session.mark_known()
    session.mark_known()
    assert session.known_count == 1

    session.restart()
    assert session.status == STUDYING
    assert session.known_count == 0
    assert session.current.front == "Q1"


def test_empty_deck_is_finished():
    session = StudySession([])
    assert session.status == FINISHED
    assert session.score_percent == 0
