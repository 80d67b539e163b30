# teamcode/core/vcs/file_registry.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from teamcode.core.config import settings
from teamcode.core.database import store_operation
from teamcode.core.errors import ClientError, NotFoundError
from teamcode.core.vcs.branches import Branch
from teamcode.core.vcs.commit_engine import append_commit, draft_hash
from teamcode.models.code_file import CodeFile

logger = logging.getLogger(__name__)


def _missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_new_file(team_id, file_name, path, author_id) -> None:
    missing = [
        name for name, value in (
            ("team_id", team_id),
            ("file_name", file_name),
            ("path", path),
            ("author_id", author_id),
        )
        if _missing(value)
    ]
    if missing:
        raise ClientError(f"Missing required field(s): {', '.join(missing)}")


def create_file(
    db: Session,
    team_id: int,
    file_name: str,
    path: str,
    language: Optional[str],
    author_id: int,
    initial_content: Optional[str] = None,
) -> CodeFile:
    """
    Register a file and record its initial content as the first draft.

    A file already registered at (team_id, path) is updated in place: it
    keeps its id and its history, and simply gains another draft commit.
    """
    validate_new_file(team_id, file_name, path, author_id)
    return _upsert_file(db, team_id, file_name, path, language, author_id, initial_content)


@store_operation
def _upsert_file(db, team_id, file_name, path, language, author_id, initial_content) -> CodeFile:
    now = datetime.now(timezone.utc)

    # 1) Insert or overwrite the registry row
    code_file = db.query(CodeFile).filter(CodeFile.team_id == team_id, CodeFile.path == path).first()
    if code_file:
        logger.info("Replacing registry entry for team %s path %s (file %s)", team_id, path, code_file.id)
        code_file.file_name = file_name
        code_file.language = language or settings.DEFAULT_LANGUAGE
        code_file.created_by = author_id
    else:
        code_file = CodeFile(
            team_id=team_id,
            file_name=file_name,
            path=path,
            language=language or settings.DEFAULT_LANGUAGE,
            created_by=author_id,
            created_at=now,
            updated_at=now,
        )
        db.add(code_file)
        db.flush()

    # 2) Seed the drafts branch
    append_commit(
        db, code_file, Branch.DRAFTS, initial_content, author_id,
        settings.INITIAL_COMMIT_MESSAGE, draft_hash(now), now,
    )
    db.commit()
    db.refresh(code_file)
    logger.info("Created code file %s (%s) for team %s", code_file.id, code_file.path, team_id)
    return code_file


@store_operation
def delete_file(db: Session, file_id: int) -> None:
    """Remove a file and every commit it has. There is no undo."""
    code_file = db.query(CodeFile).filter(CodeFile.id == file_id).first()
    if not code_file:
        raise NotFoundError(f"File {file_id} not found.")

    # The commits cascade is flushed before the file row itself
    removed = len(code_file.commits)
    db.delete(code_file)
    db.commit()
    logger.info("Deleted code file %s and %s commit(s)", file_id, removed)


def list_files(db: Session, team_id: int) -> List[CodeFile]:
    return (
        db.query(CodeFile)
        .filter(CodeFile.team_id == team_id)
        .order_by(CodeFile.updated_at.desc(), CodeFile.id.desc())
        .all()
    )
