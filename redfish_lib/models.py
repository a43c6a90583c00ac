"""
Shared data models for Redfish payloads.

The ``*Record`` classes are the intermediate, schema-shaped parse of a
payload. Resource modules project them onto their public entity types.
"""

import json
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Tuple

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from .constants import ALLOWABLE_VALUES_SUFFIX, ODATA_CONTEXT, ODATA_ETAG, ODATA_ID, ODATA_TYPE
from .errors import DecodeError
from .link import Link


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


# Strings that some services send as null
NullableStr = Annotated[str, BeforeValidator(_none_to_empty)]


class RedfishModel(BaseModel):
    model_config = ConfigDict(strict=True)


class Status(RedfishModel):
    """Status and health of a resource and its children."""
    model_config = ConfigDict(frozen=True)

    state: NullableStr = Field(default="", alias="State")
    health: NullableStr = Field(default="", alias="Health")
    health_rollup: NullableStr = Field(default="", alias="HealthRollup")


class ActionRecord(RedfishModel):
    """
    One entry of an ``Actions`` object.

    Allowable parameter values arrive as ``<Parameter>@Redfish.AllowableValues``
    siblings of the target and are kept as extra fields.
    """
    model_config = ConfigDict(extra="allow")

    target: Link = Field(default="", validation_alias=AliasChoices("target", "Target"))
    title: NullableStr = Field(default="", validation_alias=AliasChoices("title", "Title"))

    @model_validator(mode="after")
    def check_allowable_values(self) -> "ActionRecord":
        for key, values in (self.model_extra or {}).items():
            if not key.endswith(ALLOWABLE_VALUES_SUFFIX):
                continue
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise DecodeError(f"'{key}' must be a list of strings")
        return self

    @property
    def allowable_values(self) -> Dict[str, Tuple[str, ...]]:
        """Allowable values keyed by parameter name."""
        result = {}
        for key, values in (self.model_extra or {}).items():
            if key.endswith(ALLOWABLE_VALUES_SUFFIX):
                result[key[:-len(ALLOWABLE_VALUES_SUFFIX)]] = tuple(values)
        return result


class ActionsRecord(RedfishModel):
    """
    Base for a resource's ``Actions`` object.

    Subclasses declare the schema actions they recognize as fields aliased to
    their ``#<Schema>.<Action>`` keys. Everything else, including ``Oem``,
    stays in the extra fields untouched.
    """
    model_config = ConfigDict(extra="allow")

    def unrecognized(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class ResourceRecord(RedfishModel):
    """Fields common to every Redfish resource payload."""
    odata_context: NullableStr = Field(default="", alias=ODATA_CONTEXT)
    odata_etag: NullableStr = Field(default="", alias=ODATA_ETAG)
    odata_id: Link = Field(default="", alias=ODATA_ID)
    odata_type: NullableStr = Field(default="", alias=ODATA_TYPE)
    id: NullableStr = Field(default="", alias="Id")
    name: NullableStr = Field(default="", alias="Name")
    description: NullableStr = Field(default="", alias="Description")


@dataclass(frozen=True)
class OpaqueBlob:
    """
    Vendor-defined JSON kept as bytes, tagged with where it came from.

    ``data`` is the source text of the value as the service sent it; it is
    never re-encoded.
    """
    origin: str
    data: bytes = b""

    def value(self) -> Any:
        """Parsed JSON value of the blob, None when empty."""
        if not self.data:
            return None
        return json.loads(self.data)

    def __bool__(self) -> bool:
        return bool(self.data)


@dataclass(frozen=True)
class ActionDescriptor:
    target: str = ""
    title: str = ""
    allowable_values: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def allowed(self, parameter: str) -> Tuple[str, ...]:
        return self.allowable_values.get(parameter, ())
