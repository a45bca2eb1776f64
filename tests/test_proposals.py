import pytest

from studycards.core.errors import InvalidArgumentError, NotFoundError
from studycards.schemas.flashcard import FlashcardProposal, GenerateFlashcardsResponse
from studycards.services.proposals import ProposalReview, ProposalStatus


def _review(count=3):
    return ProposalReview(
        GenerateFlashcardsResponse(
            suggested_folder_name="Study Notes - Cells",
            flashcards_proposals=[FlashcardProposal(front=f"Q{i}", back=f"A{i}") for i in range(count)],
        )
    )


def test_loaded_proposals_start_pending_with_unique_ids():
    review = _review()

    assert review.suggested_folder_name == "Study Notes - Cells"
    assert {p.status for p in review.proposals} == {ProposalStatus.pending}
    assert len({p.id for p in review.proposals}) == 3


def test_accept_and_reject_toggle_both_ways():
    review = _review()
    first = review.proposals[0].id

    assert review.toggle(first).status is ProposalStatus.accepted
    assert review.toggle(first).status is ProposalStatus.rejected
    assert review.accept(first).status is ProposalStatus.accepted
    assert review.reject(first).status is ProposalStatus.rejected


def test_edit_keeps_status_and_validates():
    review = _review()
    first = review.proposals[0].id
    review.accept(first)

    edited = review.edit(first, " New front ", "New back")
    assert (edited.front, edited.back, edited.status) == ("New front", "New back", ProposalStatus.accepted)

    with pytest.raises(InvalidArgumentError):
        review.edit(first, "", "back")


def test_accepted_snapshot_does_not_follow_later_changes():
    review = _review()
    ids = [p.id for p in review.proposals]
    review.accept(ids[0])
    review.accept(ids[2])

    snapshot = review.accepted()
    review.reject(ids[0])

    assert [p.id for p in snapshot] == [ids[0], ids[2]]
    assert [p.front for p in review.to_bulk_save_items()] == ["Q2"]


def test_bulk_items_require_an_accepted_proposal():
    review = _review()
    review.reject(review.proposals[0].id)

    with pytest.raises(InvalidArgumentError, match="At least one"):
        review.to_bulk_save_items()


def test_unknown_proposal_and_reset():
    review = _review()
    with pytest.raises(NotFoundError):
        review.accept("missing")

    review.reset()
    assert review.proposals == []
    assert review.suggested_folder_name == ""
