"""
FlowerEngine Metadata Errors

Exceptions raised while fetching and validating the node metadata document.
"""

from typing import Optional


class MetadataError(Exception):
    """
    Base exception for node metadata failures.

    Carries the account that was queried, the stage that failed
    (lookup, parse or validate) and the underlying cause, if any.
    """
    stage = "lookup"

    def __init__(
        self,
        message: str,
        account: str,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.account = account
        self.cause = cause

    def __str__(self) -> str:
        return f"@{self.account} ({self.stage}): {self.args[0]}"


class AccountNotFoundError(MetadataError):
    """Raised when the account does not exist."""
    pass


class EmptyMetadataError(MetadataError):
    """Raised when the account carries no JSON metadata."""
    pass


class AccountLookupError(MetadataError):
    """Raised when the account lookup itself fails unexpectedly."""
    pass


class MalformedMetadataError(MetadataError):
    """Raised when the metadata payload is not valid JSON."""
    stage = "parse"


class InvalidMetadataShapeError(MetadataError):
    """Raised when the parsed metadata lacks `nodes` or `failing_nodes`."""
    stage = "validate"

    def __init__(
        self,
        message: str,
        account: str,
        field: str,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message, account, cause)
        self.field = field
