# teamcode/models/code_commit.py
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from teamcode.models.base import Base

class CodeCommit(Base):
    """
    One immutable snapshot of a file on a branch.

    `content` is always the whole file body. Rows are only ever inserted;
    they go away together with their CodeFile and never otherwise.
    """
    __tablename__ = "code_commits"
    __table_args__ = (
        Index("ix_code_commits_file_branch_created", "file_id", "branch", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    team_id = Column(Integer, nullable=False)
    file_id = Column(Integer, ForeignKey("code_files.id"), nullable=False)
    branch = Column(String, nullable=False)  # "drafts" or "main"
    author_id = Column(Integer, nullable=True)
    message = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Relationship
    file = relationship("CodeFile", back_populates="commits")
