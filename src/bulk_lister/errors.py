from typing import List, Optional


class BulkListerError(Exception):
    pass


class MalformedTemplate(BulkListerError):
    """The file has no usable title/price header row."""


class PreconditionError(BulkListerError):
    def __init__(self, message: str, count: int = 0):
        super().__init__(message)
        self.count = count


class AuthError(BulkListerError):
    pass


class RemoteCallError(BulkListerError):
    """A whole catalog API call failed (network, auth, rate limit, 5xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExportBlocked(BulkListerError):
    def __init__(self, invalid_ids: List[str]):
        super().__init__(
            f"Cannot export: fix {len(invalid_ids)} invalid listing(s) before exporting."
        )
        self.invalid_ids = list(invalid_ids)
