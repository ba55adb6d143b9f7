"""
FlowerEngine Metadata Fetcher

Reads the node metadata document from a Hive account and validates its shape.
"""

import json
from typing import Optional, Protocol

from pydantic import ValidationError

from shared.models import AccountRecord, NodeMetadataDocument
from .errors import (
    AccountLookupError,
    AccountNotFoundError,
    EmptyMetadataError,
    InvalidMetadataShapeError,
    MalformedMetadataError,
)

# Top-level fields that must be present, with the container type they need
REQUIRED_FIELDS = (
    ("nodes", list, "a list"),
    ("failing_nodes", dict, "an object"),
)


class AccountLookup(Protocol):
    """Anything able to resolve an account name to its record."""

    async def lookup(self, account_name: str) -> Optional[AccountRecord]:
        ...


def parse_metadata(account_name: str, payload: str) -> NodeMetadataDocument:
    """
    Parse and validate a raw metadata payload.

    Args:
        account_name: Account the payload belongs to (for error context)
        payload: JSON metadata string

    Returns:
        The validated document

    Raises:
        MalformedMetadataError: If the payload is not valid JSON
        InvalidMetadataShapeError: If `nodes` or `failing_nodes` is missing
            or has the wrong type
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedMetadataError(
            f"metadata is not valid JSON: {e}",
            account_name,
            cause=e
        ) from e

    for field, expected_type, label in REQUIRED_FIELDS:
        value = data.get(field) if isinstance(data, dict) else None
        if not isinstance(value, expected_type):
            raise InvalidMetadataShapeError(
                f"'{field}' is missing or not {label}",
                account_name,
                field=field
            )

    try:
        return NodeMetadataDocument.model_validate(data)
    except ValidationError as e:
        field = str(e.errors()[0]["loc"][0]) if e.errors() else "nodes"
        raise InvalidMetadataShapeError(
            f"'{field}' has invalid entries: {e.errors()[0]['msg']}",
            account_name,
            field=field,
            cause=e
        ) from e


async def fetch_metadata(
    lookup: AccountLookup,
    account_name: str
) -> NodeMetadataDocument:
    """
    Fetch the node metadata document published on an account.

    Args:
        lookup: Account lookup collaborator
        account_name: Hive account holding the metadata (e.g. "flowerengine")

    Returns:
        The validated document

    Raises:
        AccountNotFoundError: If the account does not exist
        EmptyMetadataError: If the account has no JSON metadata
        AccountLookupError: If the lookup raised unexpectedly
        MalformedMetadataError: If the metadata is not valid JSON
        InvalidMetadataShapeError: If required fields are missing
    """
    if not account_name:
        raise ValueError("account_name must not be empty")

    try:
        account = await lookup.lookup(account_name)
    except Exception as e:
        raise AccountLookupError(
            f"account lookup failed: {e}",
            account_name,
            cause=e
        ) from e

    if account is None:
        raise AccountNotFoundError("account not found", account_name)

    if not account.json_metadata:
        raise EmptyMetadataError("account has no JSON metadata", account_name)

    return parse_metadata(account_name, account.json_metadata)
