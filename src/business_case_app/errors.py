from __future__ import annotations


class BusinessCaseError(Exception):
    pass


class DocumentLoadError(BusinessCaseError):
    pass


class PathSyntaxError(BusinessCaseError, ValueError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class DriverPathError(BusinessCaseError):
    def __init__(self, driver_key: str, path: str, reason: str) -> None:
        super().__init__(f"Driver {driver_key!r} path {path!r} {reason}")
        self.driver_key = driver_key
        self.path = path
        self.reason = reason


class PathConflictError(BusinessCaseError, ValueError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write path {path!r}: {reason}")
        self.path = path
        self.reason = reason
