"""
Identity, raw payload and client handle shared by every Redfish resource.

Concrete resources hold an :class:`Entity` in their ``entity`` field rather
than inheriting from a common base.
"""

from typing import Any, Callable, Optional, Protocol, TypeVar

from .errors import RedfishError


class Client(Protocol):
    """The transport contract the object model depends on."""

    def get(self, uri: str) -> bytes:
        ...


class Resource(Protocol):
    """Any decoded resource: it carries its :class:`Entity`."""
    entity: "Entity"


R = TypeVar("R", bound=Resource)

# decode(raw, client) -> resource
Decoder = Callable[[bytes, Optional[Client]], R]


class Entity:
    """Common identity of a decoded resource plus the bytes it was decoded from."""

    def __init__(self, odata_id: str = "", odata_type: str = "", odata_context: str = "",
                 odata_etag: str = "", id: str = "", name: str = "", description: str = "",
                 raw_data: bytes = b"", client: Optional[Client] = None):
        self._odata_id = odata_id
        self._odata_type = odata_type
        self._odata_context = odata_context
        self._odata_etag = odata_etag
        self._id = id
        self._name = name
        self._description = description
        self._raw_data = raw_data
        self._client = client

    @property
    def odata_id(self) -> str:
        return self._odata_id

    @property
    def odata_type(self) -> str:
        return self._odata_type

    @property
    def odata_context(self) -> str:
        return self._odata_context

    @property
    def odata_etag(self) -> str:
        return self._odata_etag

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def raw_data(self) -> bytes:
        """The payload exactly as it was received."""
        return self._raw_data

    @property
    def client(self) -> Optional[Client]:
        return self._client

    def get_client(self) -> Optional[Client]:
        return self._client

    def set_client(self, client: Optional[Client]) -> None:
        self._client = client

    def is_changed(self, payload: bytes) -> bool:
        """Compare a freshly fetched payload with the one this entity was decoded from."""
        return payload != self._raw_data

    def has_changed(self) -> bool:
        """Re-fetch this resource through its client and report whether the payload differs."""
        if self._client is None:
            raise RedfishError(f"No client bound to {self._odata_id or 'entity'}")
        if not self._odata_id:
            raise RedfishError("Entity has no @odata.id to re-fetch")
        return self.is_changed(self._client.get(self._odata_id))

    def _identity(self) -> tuple:
        return (self._odata_id, self._odata_type, self._odata_context, self._odata_etag,
                self._id, self._name, self._description)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self._identity() == other._identity() and self._raw_data == other._raw_data

    def __hash__(self) -> int:
        return hash((self._identity(), self._raw_data))

    def __repr__(self) -> str:
        return f"Entity(odata_id={self._odata_id!r}, odata_type={self._odata_type!r}, name={self._name!r})"


def fetch(client: Client, uri: str, decode: Decoder) -> R:
    """
    Fetch a resource and decode it with its type's decoder.

    Args:
        client: Transport used for the read; bound to the returned resource
        uri: URI of the resource
        decode: The resource type's decoder

    Returns:
        The decoded resource

    Raises:
        TransportError: The read failed
        DecodeError: The payload does not match the resource type
    """
    if not uri:
        raise RedfishError("Cannot fetch an empty URI")
    payload = client.get(uri)
    resource = decode(payload, client)
    resource.entity.set_client(client)
    return resource
