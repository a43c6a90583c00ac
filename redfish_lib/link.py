"""
Link references between Redfish resources.

A link arrives either as a bare URI string or as an object carrying the URI
under ``@odata.id``. Both are reduced to a plain string as soon as they are
decoded; an empty string means "not linked".
"""

from typing import Annotated, Any

from pydantic import BeforeValidator

from .constants import ODATA_ID
from .errors import DecodeError


def normalize_uri(uri: str) -> str:
    """Return the canonical form of a link URI."""
    return uri.strip()


def decode_link(value: Any, required: bool = False) -> str:
    """
    Decode a link reference from its JSON value.

    Args:
        value: The decoded JSON value (a string, a link object or None)
        required: Raise instead of returning "" when the link is absent

    Returns:
        The normalized URI, or "" when the link is absent and not required
    """
    if isinstance(value, dict):
        if ODATA_ID not in value:
            raise DecodeError(f"Link object has no '{ODATA_ID}' key: {sorted(value)}")
        value = value[ODATA_ID]
        if value is not None and not isinstance(value, str):
            raise DecodeError(f"'{ODATA_ID}' must be a string, got {type(value).__name__}")

    if value is None:
        if required:
            raise DecodeError("Required link is missing")
        return ""

    if not isinstance(value, str):
        raise DecodeError(f"Link must be a string or a link object, got {type(value).__name__}")

    uri = normalize_uri(value)
    if required and not uri:
        raise DecodeError("Required link is empty")
    return uri


def _optional_link(value: Any) -> str:
    return decode_link(value)


def _required_link(value: Any) -> str:
    return decode_link(value, required=True)


# Field types for pydantic records
Link = Annotated[str, BeforeValidator(_optional_link)]
RequiredLink = Annotated[str, BeforeValidator(_required_link)]
