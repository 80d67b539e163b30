# teamcode/core/vcs/queries.py
"""Read-only views over the commit log."""
import difflib
import logging
from typing import List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from teamcode.core.errors import NotFoundError
from teamcode.core.vcs.branches import Branch, latest_commit, newest_first, parse_branch
from teamcode.models.code_commit import CodeCommit
from teamcode.models.code_file import CodeFile
from teamcode.models.member import Member
from teamcode.schemas.code import (
    BranchContents,
    CodeFileResponse,
    CommitResponse,
    ContentBundle,
    DiffResponse,
)

logger = logging.getLogger(__name__)


def _get_file(db: Session, file_id: int) -> CodeFile:
    code_file = db.query(CodeFile).filter(CodeFile.id == file_id).first()
    if not code_file:
        raise NotFoundError(f"File {file_id} not found.")
    return code_file


def _to_response(commit: CodeCommit, author_name: Optional[str], file_name: Optional[str] = None) -> CommitResponse:
    return CommitResponse.model_validate(commit).model_copy(
        update={"author_name": author_name, "file_name": file_name}
    )


def _commits_with_authors(db: Session, file_id: int, branch: Optional[Branch] = None) -> List[CommitResponse]:
    query = (
        db.query(CodeCommit, Member.name)
        .outerjoin(Member, Member.id == CodeCommit.author_id)
        .filter(CodeCommit.file_id == file_id)
    )
    if branch is not None:
        query = query.filter(CodeCommit.branch == branch.value)
    return [_to_response(commit, author_name) for commit, author_name in newest_first(query).all()]


def get_content_bundle(db: Session, file_id: int) -> ContentBundle:
    """The file, both branch heads and its whole log (all branches, newest first)."""
    code_file = _get_file(db, file_id)
    drafts_head = latest_commit(db, file_id, Branch.DRAFTS)
    main_head = latest_commit(db, file_id, Branch.MAIN)

    return ContentBundle(
        file=CodeFileResponse.model_validate(code_file),
        content=BranchContents(
            drafts=drafts_head.content if drafts_head else "",
            main=main_head.content if main_head else "",
        ),
        commits=_commits_with_authors(db, file_id),
    )


def get_history(db: Session, file_id: int, branch: Union[str, Branch, None] = Branch.MAIN) -> List[CommitResponse]:
    """Commits of one branch, newest first. An unknown file simply has no history."""
    return _commits_with_authors(db, file_id, parse_branch(branch))


def get_commit(db: Session, commit_id: int) -> CommitResponse:
    row = (
        db.query(CodeCommit, Member.name, CodeFile.file_name)
        .outerjoin(Member, Member.id == CodeCommit.author_id)
        .outerjoin(CodeFile, CodeFile.id == CodeCommit.file_id)
        .filter(CodeCommit.id == commit_id)
        .first()
    )
    if not row:
        raise NotFoundError(f"Commit {commit_id} not found.")
    commit, author_name, file_name = row
    return _to_response(commit, author_name, file_name)


def download(db: Session, file_id: int, branch: Union[str, Branch, None] = Branch.MAIN) -> Tuple[bytes, str]:
    """
    Raw head content of a branch and the name to save it under.

    Unlike publish, a branch without commits is reported as NotFoundError
    instead of being read as empty text.
    """
    branch = parse_branch(branch)
    code_file = _get_file(db, file_id)
    head = latest_commit(db, file_id, branch)
    if head is None:
        logger.warning("Download of file %s: no commit on %s yet", file_id, branch.value)
        raise NotFoundError(f"No commit on branch '{branch.value}' for file {file_id}.")
    return head.content.encode("utf-8"), code_file.file_name


def unified_diff(before: str, after: str, fromfile: str, tofile: str) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=fromfile,
            tofile=tofile,
        )
    )


def diff_commits(db: Session, base_commit_id: int, head_commit_id: int) -> DiffResponse:
    base = db.query(CodeCommit).filter(CodeCommit.id == base_commit_id).first()
    if not base:
        raise NotFoundError(f"Commit {base_commit_id} not found.")
    head = db.query(CodeCommit).filter(CodeCommit.id == head_commit_id).first()
    if not head:
        raise NotFoundError(f"Commit {head_commit_id} not found.")

    return DiffResponse(
        base_hash=base.hash,
        head_hash=head.hash,
        diff=unified_diff(base.content, head.content, f"a/{base.hash}", f"b/{head.hash}"),
    )


def diff_branches(db: Session, file_id: int) -> DiffResponse:
    """What publishing now would change: main head against drafts head."""
    code_file = _get_file(db, file_id)
    main_head = latest_commit(db, file_id, Branch.MAIN)
    drafts_head = latest_commit(db, file_id, Branch.DRAFTS)

    return DiffResponse(
        base_hash=main_head.hash if main_head else None,
        head_hash=drafts_head.hash if drafts_head else None,
        diff=unified_diff(
            main_head.content if main_head else "",
            drafts_head.content if drafts_head else "",
            f"main/{code_file.path}",
            f"drafts/{code_file.path}",
        ),
    )
