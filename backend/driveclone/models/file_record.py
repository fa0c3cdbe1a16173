"""FileRecord model - file metadata (actual bytes live in the blob host)."""
import uuid
from typing import Optional
from sqlalchemy import String, BigInteger, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column
from driveclone.models.base import Base, TimestampMixin, OwnerMixin


class FileRecord(Base, TimestampMixin, OwnerMixin):
    __tablename__ = "files"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    original_name: Mapped[str] = mapped_column(String(500), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    folder_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    cloudinary_public_id: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        Index("idx_files_user_created", "user_id", "created_at"),
    )
