from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from studycards.core.database import Base
from studycards.core.utils import generate_uuid, utc_now

FOLDER_NAME_MAX_LENGTH = 100


class Folder(Base):
    __tablename__ = "folders"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_folders_user_id_name"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(FOLDER_NAME_MAX_LENGTH), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # flashcards go away through the ON DELETE CASCADE on flashcards.folder_id
    flashcards = relationship("Flashcard", back_populates="folder", passive_deletes=True)
