# teamcode/models/code_file.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from teamcode.core.config import settings
from teamcode.models.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class CodeFile(Base):
    __tablename__ = "code_files"
    # A path is unique within a team, not globally
    __table_args__ = (UniqueConstraint("team_id", "path", name="uq_code_files_team_path"),)

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, nullable=False, index=True)
    file_name = Column(String, nullable=False)
    path = Column(String, nullable=False)
    language = Column(String, nullable=False, default=settings.DEFAULT_LANGUAGE)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationship
    commits = relationship("CodeCommit", back_populates="file", cascade="all, delete-orphan")
