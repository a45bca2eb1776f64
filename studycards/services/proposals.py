"""In-memory review of generated proposals before they are bulk-saved."""

import enum
from dataclasses import dataclass, replace
from typing import Dict, List, Tuple

from studycards.core.errors import InvalidArgumentError, NotFoundError
from studycards.core.utils import clean_text, generate_uuid
from studycards.models.flashcard import BACK_MAX_LENGTH, FRONT_MAX_LENGTH
from studycards.schemas.flashcard import BULK_SAVE_MAX_ITEMS, BulkSaveItem, GenerateFlashcardsResponse


class ProposalStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


@dataclass(frozen=True)
class Proposal:
    id: str
    front: str
    back: str
    status: ProposalStatus = ProposalStatus.pending
    generation_source: str = "ai"


class ProposalReview:
    """Accept/reject/edit workflow over one generation result.

    Accepted and rejected can be toggled back and forth; nothing returns a
    proposal to pending. Editing keeps the current status.
    """

    def __init__(self, result: GenerateFlashcardsResponse = None):
        self.suggested_folder_name = ""
        self._proposals: Dict[str, Proposal] = {}
        if result is not None:
            self.load(result)

    def load(self, result: GenerateFlashcardsResponse) -> List[Proposal]:
        self.suggested_folder_name = result.suggested_folder_name
        self._proposals = {}
        for item in result.flashcards_proposals:
            proposal = Proposal(id=generate_uuid(), front=item.front, back=item.back)
            self._proposals[proposal.id] = proposal
        return self.proposals

    @property
    def proposals(self) -> List[Proposal]:
        return list(self._proposals.values())

    def get(self, proposal_id: str) -> Proposal:
        try:
            return self._proposals[proposal_id]
        except KeyError:
            raise NotFoundError("Proposal not found") from None

    def accept(self, proposal_id: str) -> Proposal:
        return self._set_status(proposal_id, ProposalStatus.accepted)

    def reject(self, proposal_id: str) -> Proposal:
        return self._set_status(proposal_id, ProposalStatus.rejected)

    def toggle(self, proposal_id: str) -> Proposal:
        # pending proposals are accepted on first toggle
        current = self.get(proposal_id)
        if current.status is ProposalStatus.accepted:
            return self.reject(proposal_id)
        return self.accept(proposal_id)

    def edit(self, proposal_id: str, front: str, back: str) -> Proposal:
        current = self.get(proposal_id)
        updated = replace(
            current,
            front=clean_text(front, "Front text", FRONT_MAX_LENGTH),
            back=clean_text(back, "Back text", BACK_MAX_LENGTH),
        )
        self._proposals[proposal_id] = updated
        return updated

    def accepted(self) -> Tuple[Proposal, ...]:
        return tuple(p for p in self._proposals.values() if p.status is ProposalStatus.accepted)

    def to_bulk_save_items(self) -> List[BulkSaveItem]:
        snapshot = self.accepted()
        if not snapshot:
            raise InvalidArgumentError("At least one flashcard must be provided")
        if len(snapshot) > BULK_SAVE_MAX_ITEMS:
            raise InvalidArgumentError(f"Cannot save more than {BULK_SAVE_MAX_ITEMS} flashcards at once")
        return [BulkSaveItem(front=p.front, back=p.back) for p in snapshot]

    def reset(self) -> None:
        self.suggested_folder_name = ""
        self._proposals = {}

    def _set_status(self, proposal_id: str, status: ProposalStatus) -> Proposal:
        updated = replace(self.get(proposal_id), status=status)
        self._proposals[proposal_id] = updated
        return updated
