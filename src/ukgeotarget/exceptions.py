"""Custom exception hierarchy for ukgeotarget."""


class UKGeoTargetError(Exception):
    """Base exception for all ukgeotarget errors."""


class PostcodeInvalid(UKGeoTargetError):
    """The provided string is not a valid UK postcode."""

    def __init__(self, postcode: str):
        self.postcode = postcode
        super().__init__(f"Invalid UK postcode: '{postcode}'")


class DatasetUnavailable(UKGeoTargetError):
    """The reference dataset could not be reached or queried."""

    def __init__(self, db_name: str, detail: str):
        self.db_name = db_name
        self.detail = detail
        super().__init__(f"{db_name} dataset unavailable: {detail}")


class DatabaseNotFound(DatasetUnavailable):
    """A required SQLite database file does not exist."""

    def __init__(self, path: str, db_name: str):
        self.path = path
        super().__init__(db_name, f"database not found at: {path}")


class DatabaseInvalid(DatasetUnavailable):
    """A database exists but is missing expected tables or columns."""

    def __init__(self, path: str, db_name: str, detail: str):
        self.path = path
        super().__init__(db_name, f"invalid database at {path}: {detail}")
