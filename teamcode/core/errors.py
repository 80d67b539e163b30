# teamcode/core/errors.py


class TeamCodeError(Exception):
    """Base class for errors reported by the version-control core."""


class ClientError(TeamCodeError):
    """The caller sent an incomplete or invalid request. Nothing was written."""


class NotFoundError(TeamCodeError):
    """A file, commit or branch head the caller asked for does not exist."""


class StoreError(TeamCodeError):
    """The underlying database failed. The caller decides whether to retry."""
