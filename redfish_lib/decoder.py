"""
Two-stage decoding of Redfish payloads.

Stage 1 parses the raw bytes into a schema-shaped pydantic record (flat
fields, the nested ``Actions`` object, link fields). Stage 2 projects that
record onto a public entity type: actions are flattened to named fields,
links are already plain strings, and vendor data (``Oem`` and unrecognized
actions) is copied out of the raw bytes into :class:`OpaqueBlob`. Both
stages are pure.
"""

import json
import re
from typing import Callable, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import ValidationError

from .constants import ACTIONS, OEM
from .entity import Client, Entity
from .errors import DecodeError
from .models import ActionDescriptor, ActionRecord, ActionsRecord, OpaqueBlob, ResourceRecord

T = TypeVar("T", bound=ResourceRecord)
E = TypeVar("E")

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_scanner = json.JSONDecoder()


def _as_bytes(raw: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


def parse_record(raw: Union[bytes, str], record_type: Type[T]) -> T:
    """Parse a payload into its intermediate record, raising DecodeError on any mismatch."""
    try:
        return record_type.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError(f"Failed to decode {record_type.__name__}: {e}") from e


def build_entity(record: ResourceRecord, raw: bytes, client: Optional[Client] = None) -> Entity:
    return Entity(
        odata_id=record.odata_id,
        odata_type=record.odata_type,
        odata_context=record.odata_context,
        odata_etag=record.odata_etag,
        id=record.id,
        name=record.name,
        description=record.description,
        raw_data=raw,
        client=client,
    )


def project_action(action: Optional[ActionRecord]) -> ActionDescriptor:
    """Flatten one action record; a missing action has an empty target."""
    if action is None:
        return ActionDescriptor()
    return ActionDescriptor(
        target=action.target,
        title=action.title,
        allowable_values=action.allowable_values,
    )


def _skip_whitespace(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()


def raw_members(text: str) -> List[Tuple[str, str, str]]:
    """
    Split a JSON object into its members without re-encoding anything.

    Returns:
        (key, key source, value source) triples in source order, duplicate
        keys included

    Raises:
        DecodeError: ``text`` is not a JSON object
    """
    members = []
    try:
        pos = _skip_whitespace(text, 0)
        if text[pos:pos + 1] != "{":
            raise DecodeError("Expected a JSON object")
        pos = _skip_whitespace(text, pos + 1)
        if text[pos:pos + 1] == "}":
            return members
        while True:
            if text[pos:pos + 1] != '"':
                raise DecodeError(f"Expected an object key at offset {pos}")
            key, end = _scanner.raw_decode(text, pos)
            key_source = text[pos:end]
            pos = _skip_whitespace(text, end)
            if text[pos:pos + 1] != ":":
                raise DecodeError(f"Expected ':' at offset {pos}")
            start = _skip_whitespace(text, pos + 1)
            _, end = _scanner.raw_decode(text, start)
            members.append((key, key_source, text[start:end]))
            pos = _skip_whitespace(text, end)
            if text[pos:pos + 1] == "}":
                return members
            if text[pos:pos + 1] != ",":
                raise DecodeError(f"Expected ',' or '}}' at offset {pos}")
            pos = _skip_whitespace(text, pos + 1)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e


def _member_source(text: str, key: str) -> Optional[str]:
    # Last occurrence wins, as in the parsed record
    found = None
    for name, _, source in raw_members(text):
        if name == key:
            found = source
    return found


def _blob(origin: str, source: Optional[str]) -> OpaqueBlob:
    if source is None or source == "null":
        return OpaqueBlob(origin)
    return OpaqueBlob(origin, source.encode("utf-8"))


def oem_blob(raw: bytes, origin: str) -> OpaqueBlob:
    """The top-level ``Oem`` value exactly as the service sent it."""
    return _blob(origin, _member_source(raw.decode("utf-8"), OEM))


def oem_actions(actions: Optional[ActionsRecord], raw: bytes, origin: str) -> OpaqueBlob:
    """
    Everything under ``Actions`` that the resource type does not recognize.

    The blob is a JSON object holding each unrecognized member with its key
    and value copied verbatim from ``raw``.
    """
    if actions is None:
        return OpaqueBlob(origin)
    unrecognized = set(actions.unrecognized())
    if not unrecognized:
        return OpaqueBlob(origin)
    source = _member_source(raw.decode("utf-8"), ACTIONS)
    kept = [f"{key_source}:{value_source}" for key, key_source, value_source in raw_members(source)
            if key in unrecognized]
    return _blob(origin, "{" + ",".join(kept) + "}")


def decode_resource(raw: Union[bytes, str], record_type: Type[T],
                    project: Callable[[T, Entity], E], client: Optional[Client] = None) -> E:
    """
    Decode a payload into a resource entity.

    Args:
        raw: The payload as received
        record_type: Intermediate record type of the resource
        project: Copies the parsed record onto the public entity type
        client: Client bound to the new entity

    Returns:
        The projected entity, holding ``raw`` unchanged

    Raises:
        DecodeError: The payload is not valid JSON or does not match ``record_type``
    """
    raw = _as_bytes(raw)
    record = parse_record(raw, record_type)
    return project(record, build_entity(record, raw, client))
