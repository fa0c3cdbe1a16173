"""Import all models so SQLAlchemy metadata knows about them."""
from driveclone.models.base import Base
from driveclone.models.user import User
from driveclone.models.folder import Folder
from driveclone.models.file_record import FileRecord

__all__ = ["Base", "User", "Folder", "FileRecord"]
