"""
SoftwareInventory: one firmware or software component known to the update service.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from pydantic import Field

from .collection import list_referenced
from .constants import ACTIONS
from .decoder import decode_resource, oem_actions, oem_blob
from .entity import Client, Entity, fetch
from .link import Link
from .models import ActionsRecord, NullableStr, OpaqueBlob, ResourceRecord, Status


class SoftwareInventoryActions(ActionsRecord):
    """The schema defines no standard actions, only ``Oem``."""


class SoftwareInventoryRecord(ResourceRecord):
    lowest_supported_version: NullableStr = Field(default="", alias="LowestSupportedVersion")
    manufacturer: NullableStr = Field(default="", alias="Manufacturer")
    related_item: Optional[List[Link]] = Field(default=None, alias="RelatedItem")
    release_date: NullableStr = Field(default="", alias="ReleaseDate")
    software_id: NullableStr = Field(default="", alias="SoftwareId")
    status: Optional[Status] = Field(default=None, alias="Status")
    uefi_device_paths: Optional[List[str]] = Field(default=None, alias="UefiDevicePaths")
    updateable: Optional[bool] = Field(default=None, alias="Updateable")
    version: NullableStr = Field(default="", alias="Version")
    write_protected: Optional[bool] = Field(default=None, alias="WriteProtected")
    actions: Optional[SoftwareInventoryActions] = Field(default=None, alias=ACTIONS)


@dataclass(frozen=True)
class SoftwareInventory:
    """A single software component, such as a BIOS or BMC firmware image."""
    entity: Entity
    # LowestSupportedVersion is the lowest version this component can be downgraded to.
    lowest_supported_version: str = ""
    manufacturer: str = ""
    # RelatedItem holds URIs of the resources this component applies to.
    related_items: Tuple[str, ...] = ()
    release_date: str = ""
    # SoftwareID is the implementation-specific identifier of the image.
    software_id: str = ""
    status: Status = field(default_factory=Status)
    uefi_device_paths: Tuple[str, ...] = ()
    # Updateable tells whether the update service can update this component.
    updateable: bool = False
    version: str = ""
    write_protected: bool = False
    oem_actions: OpaqueBlob = field(default_factory=lambda: OpaqueBlob("SoftwareInventory.Actions"))
    oem: OpaqueBlob = field(default_factory=lambda: OpaqueBlob("SoftwareInventory.Oem"))

    @property
    def odata_id(self) -> str:
        return self.entity.odata_id

    @property
    def name(self) -> str:
        return self.entity.name


def _project(record: SoftwareInventoryRecord, entity: Entity) -> SoftwareInventory:
    return SoftwareInventory(
        entity=entity,
        lowest_supported_version=record.lowest_supported_version,
        manufacturer=record.manufacturer,
        related_items=tuple(uri for uri in record.related_item or () if uri),
        release_date=record.release_date,
        software_id=record.software_id,
        status=record.status or Status(),
        uefi_device_paths=tuple(record.uefi_device_paths or ()),
        updateable=bool(record.updateable),
        version=record.version,
        write_protected=bool(record.write_protected),
        oem_actions=oem_actions(record.actions, entity.raw_data, "SoftwareInventory.Actions"),
        oem=oem_blob(entity.raw_data, "SoftwareInventory.Oem"),
    )


def decode_software_inventory(raw: Union[bytes, str], client: Optional[Client] = None) -> SoftwareInventory:
    return decode_resource(raw, SoftwareInventoryRecord, _project, client)


def get_software_inventory(client: Client, uri: str) -> SoftwareInventory:
    """Fetch a SoftwareInventory instance from the service."""
    return fetch(client, uri, decode_software_inventory)


def list_referenced_software_inventories(client: Client, collection_uri: str) -> List[SoftwareInventory]:
    """Fetch every SoftwareInventory of a collection, in collection order."""
    return list_referenced(client, collection_uri, decode_software_inventory)
