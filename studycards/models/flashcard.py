import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from studycards.core.database import Base
from studycards.core.utils import generate_uuid, utc_now

FRONT_MAX_LENGTH = 200
BACK_MAX_LENGTH = 500


class GenerationSource(str, enum.Enum):
    manual = "manual"
    ai = "ai"


class Flashcard(Base):
    __tablename__ = "flashcards"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    front = Column(String(FRONT_MAX_LENGTH), nullable=False)
    back = Column(String(BACK_MAX_LENGTH), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="CASCADE"), nullable=False, index=True)
    generation_source = Column(
        Enum(GenerationSource, name="generation_source", native_enum=False,
             values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=GenerationSource.manual,
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    folder = relationship("Folder", back_populates="flashcards")
