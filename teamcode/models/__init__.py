# Importing the models registers them on Base.metadata
from teamcode.models.base import Base
from teamcode.models.member import Member
from teamcode.models.code_file import CodeFile
from teamcode.models.code_commit import CodeCommit

__all__ = ["Base", "Member", "CodeFile", "CodeCommit"]
