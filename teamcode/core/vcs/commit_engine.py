# teamcode/core/vcs/commit_engine.py
"""
State transitions of the per-file commit log.

Every operation here appends; none updates or removes an existing commit.
The head of a branch is always derived by query (see branches.py), so a
revert is a replay of old content as a new commit, never a pointer rewind.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy.orm import Session

from teamcode.core.config import settings
from teamcode.core.database import store_operation
from teamcode.core.errors import NotFoundError
from teamcode.core.notifier import ChangeNotifier
from teamcode.core.vcs.branches import Branch, latest_content, parse_branch
from teamcode.models.code_commit import CodeCommit
from teamcode.models.code_file import CodeFile

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def draft_hash(moment: datetime) -> str:
    """Display token for auto-saved drafts."""
    return f"draft-{_millis(moment)}"


def commit_hash(moment: datetime) -> str:
    """Display token for publishes and reverts: time prefix plus random suffix."""
    return f"{_millis(moment):x}{uuid.uuid4().hex[:8]}"


def append_commit(
    db: Session,
    code_file: CodeFile,
    branch: Branch,
    content: Optional[str],
    author_id: Optional[int],
    message: str,
    hash_token: str,
    moment: datetime,
) -> CodeCommit:
    """
    Stage a new commit for `code_file` and bump the file's updated_at.
    The caller owns the transaction.
    """
    commit = CodeCommit(
        team_id=code_file.team_id,
        file=code_file,
        branch=branch.value,
        author_id=author_id,
        message=message,
        content=content or "",
        hash=hash_token,
        created_at=moment,
    )
    db.add(commit)
    code_file.updated_at = moment
    return commit


def _get_file(db: Session, file_id: int) -> CodeFile:
    code_file = db.query(CodeFile).filter(CodeFile.id == file_id).first()
    if not code_file:
        logger.warning("Code file %s not found", file_id)
        raise NotFoundError(f"File {file_id} not found.")
    return code_file


@store_operation
def save_draft(db: Session, file_id: int, content: Optional[str], author_id: Optional[int]) -> int:
    """
    Auto-save: append `content` to the drafts branch.

    Identical content is not deduplicated, every call adds a commit.
    Returns the new commit id.
    """
    code_file = _get_file(db, file_id)
    now = _utcnow()
    commit = append_commit(
        db, code_file, Branch.DRAFTS, content, author_id,
        settings.AUTOSAVE_MESSAGE, draft_hash(now), now,
    )
    db.commit()
    logger.info("Saved draft %s for file %s (%s chars)", commit.hash, file_id, len(commit.content))
    return commit.id


@store_operation
def publish(
    db: Session,
    notifier: ChangeNotifier,
    file_id: int,
    message: Optional[str] = None,
    author_id: Optional[int] = None,
) -> str:
    """
    Commit the current drafts head to main and return the new hash.

    With no draft yet the main commit is empty. Publishing again without a
    new draft still creates another main commit.
    """
    # 1) Read drafts head and append to main in the same transaction
    code_file = _get_file(db, file_id)
    content = latest_content(db, file_id, Branch.DRAFTS)
    now = _utcnow()
    commit = append_commit(
        db, code_file, Branch.MAIN, content, author_id,
        message or settings.DEFAULT_COMMIT_MESSAGE, commit_hash(now), now,
    )
    db.commit()
    logger.info("Published %s to main for file %s", commit.hash, file_id)

    # 2) Tell observers
    notifier.publish({
        "type": "commit",
        "file_id": code_file.id,
        "team_id": code_file.team_id,
        "branch": Branch.MAIN.value,
        "message": commit.message,
        "hash": commit.hash,
        "author_id": author_id,
        "timestamp": now.isoformat(),
    })
    return commit.hash


@store_operation
def revert(
    db: Session,
    notifier: ChangeNotifier,
    commit_id: int,
    target_branch: Union[str, Branch],
    author_id: Optional[int] = None,
) -> str:
    """
    Replay the content of commit `commit_id` as a new head of `target_branch`.

    The source commit stays as it is and the branch only gains an entry.
    Returns the new hash.
    """
    branch = parse_branch(target_branch)

    # 1) Find the older commit
    source = db.query(CodeCommit).filter(CodeCommit.id == commit_id).first()
    if not source:
        logger.warning("Commit %s not found for revert", commit_id)
        raise NotFoundError(f"Commit {commit_id} not found.")

    # 2) Find the file it belongs to
    code_file = db.query(CodeFile).filter(CodeFile.id == source.file_id).first()
    if not code_file:
        logger.warning("Commit %s points at missing file %s", commit_id, source.file_id)
        raise NotFoundError(f"File for commit {commit_id} not found.")

    # 3) Append the replayed content
    now = _utcnow()
    commit = append_commit(
        db, code_file, branch, source.content, author_id,
        f"Revert to {source.hash}", commit_hash(now), now,
    )
    db.commit()
    logger.info("Reverted file %s on %s to %s as %s", code_file.id, branch.value, source.hash, commit.hash)

    # 4) Tell observers
    notifier.publish({
        "type": "revert",
        "file_id": code_file.id,
        "team_id": code_file.team_id,
        "branch": branch.value,
        "message": commit.message,
        "hash": commit.hash,
        "reverted_from": source.hash,
        "source_commit_id": source.id,
        "author_id": author_id,
        "timestamp": now.isoformat(),
    })
    return commit.hash
