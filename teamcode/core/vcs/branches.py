# teamcode/core/vcs/branches.py
from enum import Enum
from typing import Optional, Union

from sqlalchemy.orm import Query, Session

from teamcode.core.errors import ClientError
from teamcode.models.code_commit import CodeCommit


class Branch(str, Enum):
    """The two permanent branches every file has."""
    DRAFTS = "drafts"
    MAIN = "main"


def parse_branch(value: Union[str, Branch, None], default: Branch = Branch.MAIN) -> Branch:
    """Accepts a Branch or its string value; anything else is a client error."""
    if value is None or value == "":
        return default
    if isinstance(value, Branch):
        return value
    try:
        return Branch(value)
    except ValueError:
        raise ClientError(f"Unknown branch '{value}'. Expected 'drafts' or 'main'.")


def newest_first(query: Query) -> Query:
    # created_at alone is ambiguous for writes landing in the same instant,
    # the auto-increment id breaks the tie.
    return query.order_by(CodeCommit.created_at.desc(), CodeCommit.id.desc())


def latest_commit(db: Session, file_id: int, branch: Branch) -> Optional[CodeCommit]:
    """Head of (file_id, branch), or None while the branch has no commits."""
    query = db.query(CodeCommit).filter(
        CodeCommit.file_id == file_id,
        CodeCommit.branch == branch.value,
    )
    return newest_first(query).first()


def latest_content(db: Session, file_id: int, branch: Branch) -> str:
    head = latest_commit(db, file_id, branch)
    return head.content if head is not None else ""
