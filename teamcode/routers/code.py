# teamcode/routers/code.py
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from teamcode.core.database import get_db
from teamcode.core.dependencies import get_notifier
from teamcode.core.notifier import ChangeNotifier
from teamcode.core.vcs import commit_engine, file_registry, queries
from teamcode.core.vcs.branches import Branch
from teamcode.schemas.code import (
    CodeFileResponse,
    CommitHashResponse,
    CommitResponse,
    ContentBundle,
    CreateFileRequest,
    DeleteResponse,
    DiffResponse,
    DownloadRequest,
    PublishRequest,
    RevertRequest,
    SaveDraftRequest,
    SaveDraftResponse,
)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """
    Attachment header for a free-form file name.

    Header values must be latin-1, so the plain `filename=` form only keeps
    printable ASCII without quotes or backslashes. When that changes the
    name, the exact name follows as an RFC 5987 `filename*`.
    """
    ascii_name = "".join(
        ch if 32 <= ord(ch) < 127 else "_" for ch in filename
    ).replace('"', "").replace("\\", "")
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=utf-8''{quote(filename)}"
    return header


@router.get("/files/{team_id}", response_model=List[CodeFileResponse])
def list_files(team_id: int, db: Session = Depends(get_db)):
    """All code files of a team, most recently updated first."""
    return file_registry.list_files(db, team_id)


@router.post("/files", response_model=CodeFileResponse)
def create_file(payload: CreateFileRequest, db: Session = Depends(get_db)):
    """
    Create a code file, or replace the registry entry already at that path.

    The supplied content (empty if omitted) becomes a new drafts commit.
    team_id, file_name, file_path and author_id are required.
    """
    return file_registry.create_file(
        db,
        team_id=payload.team_id,
        file_name=payload.file_name,
        path=payload.file_path,
        language=payload.language,
        author_id=payload.author_id,
        initial_content=payload.content,
    )


@router.get("/files/{file_id}/content", response_model=ContentBundle)
def get_file_content(file_id: int, db: Session = Depends(get_db)):
    return queries.get_content_bundle(db, file_id)


@router.post("/files/{file_id}/draft", response_model=SaveDraftResponse)
def save_draft(file_id: int, payload: SaveDraftRequest, db: Session = Depends(get_db)):
    commit_id = commit_engine.save_draft(db, file_id, payload.content, payload.author_id)
    return SaveDraftResponse(id=commit_id)


@router.post("/files/{file_id}/commit", response_model=CommitHashResponse)
def commit_to_main(
    file_id: int,
    payload: PublishRequest,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Publish the latest draft to main."""
    commit_hash = commit_engine.publish(db, notifier, file_id, payload.message, payload.author_id)
    return CommitHashResponse(hash=commit_hash)


@router.get("/files/{file_id}/history", response_model=List[CommitResponse])
def get_history(file_id: int, branch: Branch = Query(Branch.MAIN), db: Session = Depends(get_db)):
    return queries.get_history(db, file_id, branch)


@router.get("/files/{file_id}/diff", response_model=DiffResponse)
def diff_branches(file_id: int, db: Session = Depends(get_db)):
    """Unified diff from the main head to the drafts head."""
    return queries.diff_branches(db, file_id)


@router.post("/files/{file_id}/download")
def download_file(file_id: int, payload: Optional[DownloadRequest] = None, db: Session = Depends(get_db)):
    """
    Return the head of a branch as a file attachment. 404 while the branch
    has no commits.
    """
    body, filename = queries.download(db, file_id, payload.branch if payload else Branch.MAIN)
    return Response(
        content=body,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.delete("/files/{file_id}", response_model=DeleteResponse)
def delete_file(file_id: int, db: Session = Depends(get_db)):
    """Delete a file together with all of its commits."""
    file_registry.delete_file(db, file_id)
    return DeleteResponse()


@router.get("/commits/{commit_id}", response_model=CommitResponse)
def get_commit(commit_id: int, db: Session = Depends(get_db)):
    return queries.get_commit(db, commit_id)


@router.post("/commits/{commit_id}/revert", response_model=CommitHashResponse)
def revert_commit(
    commit_id: int,
    payload: RevertRequest,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """
    Make the content of an older commit the new head of a branch. History
    is only ever extended, the older commit is left as it is.
    """
    commit_hash = commit_engine.revert(db, notifier, commit_id, payload.branch, payload.author_id)
    return CommitHashResponse(hash=commit_hash)


@router.get("/commits/{base_id}/compare/{head_id}", response_model=DiffResponse)
def compare_commits(base_id: int, head_id: int, db: Session = Depends(get_db)):
    return queries.diff_commits(db, base_id, head_id)
