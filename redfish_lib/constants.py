"""
Constants used throughout the Redfish library.
"""

# Wire-format keys
ODATA_ID = "@odata.id"
ODATA_TYPE = "@odata.type"
ODATA_CONTEXT = "@odata.context"
ODATA_ETAG = "@odata.etag"

MEMBERS = "Members"
MEMBERS_COUNT = "Members@odata.count"
MEMBERS_NEXT_LINK = "Members@odata.nextLink"

ACTIONS = "Actions"
OEM = "Oem"
ALLOWABLE_VALUES_SUFFIX = "@Redfish.AllowableValues"

# Schema-qualified action names
SIMPLE_UPDATE_ACTION = "#UpdateService.SimpleUpdate"
START_UPDATE_ACTION = "#UpdateService.StartUpdate"

# Well-known service URIs
SERVICE_ROOT = "/redfish/v1"
UPDATE_SERVICE_URI = "/redfish/v1/UpdateService"

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RESPONSE_SIZE = 5 * 1024 * 1024

# Standard headers, always prefer JSON
DEFAULT_HEADERS = {
    'Accept': 'application/json',
    'OData-Version': '4.0',
    'User-Agent': 'Redfish-Lib/0.1'
}
