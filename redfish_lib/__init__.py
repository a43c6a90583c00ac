"""
Redfish Library - A typed object model for the Redfish resource graph.
"""

from .errors import RedfishError, TransportError, DecodeError
from .link import decode_link
from .models import ActionDescriptor, OpaqueBlob, Status
from .entity import Client, Entity, fetch
from .collection import collection_member_links, list_referenced
from .softwareinventory import (
    SoftwareInventory,
    decode_software_inventory,
    get_software_inventory,
    list_referenced_software_inventories
)
from .updateservice import UpdateService, decode_update_service, get_update_service
from .client import RedfishClient

__all__ = [
    'RedfishError',
    'TransportError',
    'DecodeError',
    'decode_link',
    'ActionDescriptor',
    'OpaqueBlob',
    'Status',
    'Client',
    'Entity',
    'fetch',
    'collection_member_links',
    'list_referenced',
    'SoftwareInventory',
    'decode_software_inventory',
    'get_software_inventory',
    'list_referenced_software_inventories',
    'UpdateService',
    'decode_update_service',
    'get_update_service',
    'RedfishClient'
]
