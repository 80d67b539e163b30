# teamcode/schemas/code.py
import hashlib
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from teamcode.core.vcs.branches import Branch

class CodeFileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: int
    file_name: str
    path: str
    language: str
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

class CommitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: int
    file_id: int
    branch: str
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    file_name: Optional[str] = None  # only filled for single-commit lookups
    message: str
    content: str
    hash: str
    created_at: datetime

    @computed_field
    @property
    def content_sha256(self) -> str:
        return hashlib.sha256(self.content.encode("utf-8")).hexdigest()

class BranchContents(BaseModel):
    drafts: str = ""
    main: str = ""

class ContentBundle(BaseModel):
    file: CodeFileResponse
    content: BranchContents
    commits: List[CommitResponse] = []

    @property
    def drafts_content(self) -> str:
        return self.content.drafts

    @property
    def main_content(self) -> str:
        return self.content.main

class DiffResponse(BaseModel):
    base_hash: Optional[str] = None
    head_hash: Optional[str] = None
    diff: str

# Requests. Required fields of a new file are checked by the registry so a
# missing one is reported as a 400 rather than a schema error.
class CreateFileRequest(BaseModel):
    team_id: Optional[int] = None
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    language: Optional[str] = None
    content: Optional[str] = None
    author_id: Optional[int] = None

class SaveDraftRequest(BaseModel):
    content: str = ""
    author_id: Optional[int] = None

class PublishRequest(BaseModel):
    message: Optional[str] = None
    author_id: Optional[int] = None

class RevertRequest(BaseModel):
    branch: Branch = Branch.MAIN
    author_id: Optional[int] = None

class DownloadRequest(BaseModel):
    branch: Branch = Branch.MAIN

class SaveDraftResponse(BaseModel):
    success: bool = True
    id: int

class CommitHashResponse(BaseModel):
    success: bool = True
    hash: str

class DeleteResponse(BaseModel):
    success: bool = True
