"""Folder model - named container nodes of a per-user tree."""
import uuid
from typing import Optional
from sqlalchemy import String, JSON, Uuid, Index, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from driveclone.models.base import Base, TimestampMixin, OwnerMixin


class Folder(Base, TimestampMixin, OwnerMixin):
    __tablename__ = "folders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Plain reference, not a foreign key: a dangling parent is tolerated by path resolution.
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    # Ancestor ids, root first, as strings. Materialized at creation from the parent's path.
    path: Mapped[list] = mapped_column(JSON, default=list)

    __table_args__ = (
        UniqueConstraint("user_id", "parent_id", "name", name="uq_folder_sibling_name"),
        # NULL parent_id never collides in the constraint above.
        Index(
            "uq_folder_root_name", "user_id", "name",
            unique=True,
            postgresql_where=text("parent_id IS NULL"),
            sqlite_where=text("parent_id IS NULL"),
        ),
        Index("idx_folders_user_created", "user_id", "created_at"),
    )
