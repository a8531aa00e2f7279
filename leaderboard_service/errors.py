class LeaderboardError(Exception):
    pass


class InvalidEntryError(LeaderboardError, ValueError):
    """Submission is missing a field or names an unknown difficulty."""


class StoreError(LeaderboardError):
    """The object store could not be read or written."""


class BlobNotFound(StoreError):
    pass
