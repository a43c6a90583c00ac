"""
UpdateService: the firmware and software update service offered by a Redfish API.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import AliasChoices, Field

from .constants import ACTIONS, SIMPLE_UPDATE_ACTION, START_UPDATE_ACTION
from .decoder import decode_resource, oem_actions, oem_blob, project_action
from .entity import Client, Entity, fetch
from .errors import RedfishError
from .link import Link
from .models import ActionRecord, ActionsRecord, NullableStr, OpaqueBlob, ResourceRecord, Status
from .softwareinventory import SoftwareInventory, list_referenced_software_inventories


class UpdateServiceActions(ActionsRecord):
    simple_update: Optional[ActionRecord] = Field(default=None, alias=SIMPLE_UPDATE_ACTION)
    # Starts updating images previously invoked with an OperationApplyTime
    # of OnStartUpdateRequest.
    start_update: Optional[ActionRecord] = Field(default=None, alias=START_UPDATE_ACTION)


class UpdateServiceRecord(ResourceRecord):
    firmware_inventory: Link = Field(default="", alias="FirmwareInventory")
    software_inventory: Link = Field(default="", alias="SoftwareInventory")
    http_push_uri: NullableStr = Field(default="", alias="HttpPushUri")
    multipart_http_push_uri: NullableStr = Field(
        default="", validation_alias=AliasChoices("MultipartHttpPushUri", "MultiPartHttpPushUri"))
    http_push_uri_targets: Optional[List[str]] = Field(default=None, alias="HttpPushUriTargets")
    http_push_uri_targets_busy: Optional[bool] = Field(default=None, alias="HttpPushUriTargetsBusy")
    max_image_size_bytes: Optional[int] = Field(default=None, alias="MaxImageSizeBytes")
    service_enabled: Optional[bool] = Field(default=None, alias="ServiceEnabled")
    status: Optional[Status] = Field(default=None, alias="Status")
    actions: Optional[UpdateServiceActions] = Field(default=None, alias=ACTIONS)


@dataclass(frozen=True)
class UpdateService:
    """
    The update service of a Redfish service.

    Link fields hold URIs only; ``firmware_inventories()`` and
    ``software_inventories()`` fetch the linked collections on demand. An
    empty link means the service does not expose that collection.
    """
    entity: Entity
    firmware_inventory: str = ""
    software_inventory: str = ""
    # HTTPPushURI is where firmware images are pushed (POST) to.
    http_push_uri: str = ""
    # MultipartHTTPPushURI is where multipart push updates are POSTed to.
    multipart_http_push_uri: str = ""
    http_push_uri_targets: Tuple[str, ...] = ()
    http_push_uri_targets_busy: bool = False
    max_image_size_bytes: Optional[int] = None
    service_enabled: bool = False
    status: Status = field(default_factory=Status)
    # TransferProtocol lists the protocols SimpleUpdate can fetch an image with.
    transfer_protocol: Tuple[str, ...] = ()
    # UpdateServiceTarget is the SimpleUpdate action target.
    update_service_target: str = ""
    # StartUpdateTarget is the StartUpdate action target.
    start_update_target: str = ""
    # Vendor specific actions, left for the caller to interpret.
    oem_actions: OpaqueBlob = field(default_factory=lambda: OpaqueBlob("UpdateService.Actions"))
    oem: OpaqueBlob = field(default_factory=lambda: OpaqueBlob("UpdateService.Oem"))

    @property
    def odata_id(self) -> str:
        return self.entity.odata_id

    @property
    def name(self) -> str:
        return self.entity.name

    def firmware_inventories(self) -> List[SoftwareInventory]:
        """Get the firmware inventory collection of this update service."""
        return list_referenced_software_inventories(self.entity.client, self.firmware_inventory)

    def software_inventories(self) -> List[SoftwareInventory]:
        """Get the software inventory collection of this update service."""
        return list_referenced_software_inventories(self.entity.client, self.software_inventory)

    def _action_client(self) -> Any:
        client = self.entity.client
        if client is None or not hasattr(client, "post"):
            raise RedfishError("Invoking an action needs a client that supports post()")
        return client

    def simple_update(self, image_uri: str, transfer_protocol: Optional[str] = None,
                      targets: Optional[Sequence[str]] = None) -> Any:
        """
        Invoke SimpleUpdate to have the service pull and apply an image.

        Args:
            image_uri: URI of the software image to install
            transfer_protocol: Protocol used to fetch the image, checked against
                the advertised allowable values when there are any
            targets: URIs of the components to update

        Returns:
            Whatever the client's ``post()`` returns (normally the HTTP response,
            whose Location header points at the task monitor)
        """
        if not self.update_service_target:
            raise RedfishError("SimpleUpdate is not supported by this update service")
        if transfer_protocol and self.transfer_protocol and transfer_protocol not in self.transfer_protocol:
            raise ValueError(f"Transfer protocol {transfer_protocol!r} not in allowable values {list(self.transfer_protocol)}")

        payload: Dict[str, Any] = {"ImageURI": image_uri}
        if transfer_protocol:
            payload["TransferProtocol"] = transfer_protocol
        if targets:
            payload["Targets"] = list(targets)
        return self._action_client().post(self.update_service_target, payload)

    def start_update(self) -> Any:
        """Invoke StartUpdate for images staged with OnStartUpdateRequest."""
        if not self.start_update_target:
            raise RedfishError("StartUpdate is not supported by this update service")
        return self._action_client().post(self.start_update_target, {})


def _project(record: UpdateServiceRecord, entity: Entity) -> UpdateService:
    actions = record.actions or UpdateServiceActions()
    simple_update = project_action(actions.simple_update)
    start_update = project_action(actions.start_update)
    return UpdateService(
        entity=entity,
        firmware_inventory=record.firmware_inventory,
        software_inventory=record.software_inventory,
        http_push_uri=record.http_push_uri,
        multipart_http_push_uri=record.multipart_http_push_uri,
        http_push_uri_targets=tuple(record.http_push_uri_targets or ()),
        http_push_uri_targets_busy=bool(record.http_push_uri_targets_busy),
        max_image_size_bytes=record.max_image_size_bytes,
        service_enabled=bool(record.service_enabled),
        status=record.status or Status(),
        transfer_protocol=simple_update.allowed("TransferProtocol"),
        update_service_target=simple_update.target,
        start_update_target=start_update.target,
        oem_actions=oem_actions(actions, entity.raw_data, "UpdateService.Actions"),
        oem=oem_blob(entity.raw_data, "UpdateService.Oem"),
    )


def decode_update_service(raw: Union[bytes, str], client: Optional[Client] = None) -> UpdateService:
    return decode_resource(raw, UpdateServiceRecord, _project, client)


def get_update_service(client: Client, uri: str) -> UpdateService:
    """Fetch the UpdateService instance at ``uri`` from the service."""
    return fetch(client, uri, decode_update_service)
