#!/usr/bin/env python3
"""
Tests for collection resolution.
"""

import json
import unittest
from unittest.mock import MagicMock, call

from redfish_lib import (
    DecodeError,
    TransportError,
    collection_member_links,
    decode_update_service,
    list_referenced,
    list_referenced_software_inventories
)


def _inventory(uri: str, version: str) -> bytes:
    return json.dumps({
        "@odata.id": uri,
        "@odata.type": "#SoftwareInventory.v1_2_0.SoftwareInventory",
        "Id": uri.rsplit("/", 1)[-1],
        "Name": f"Firmware {uri}",
        "Version": version
    }).encode("utf-8")


class FakeService:
    """Serves canned payloads and records every URI requested."""

    def __init__(self, documents, failing=None):
        self.documents = documents
        self.failing = failing or {}
        self.client = MagicMock()
        self.client.get.side_effect = self._get

    def _get(self, uri):
        if uri in self.failing:
            raise self.failing[uri]
        return self.documents[uri]

    @property
    def requested(self):
        return [c.args[0] for c in self.client.get.call_args_list]


class TestListReferenced(unittest.TestCase):
    """Member resolution preserves envelope order and fails as a whole."""

    def setUp(self):
        self.documents = {
            "/c": b'{"Members":[{"@odata.id":"/a"},{"@odata.id":"/b"}]}',
            "/a": _inventory("/a", "1.0"),
            "/b": _inventory("/b", "2.0"),
        }

    def test_members_in_envelope_order(self):
        service = FakeService(self.documents)

        inventories = list_referenced_software_inventories(service.client, "/c")

        self.assertEqual([i.entity.odata_id for i in inventories], ["/a", "/b"])
        self.assertEqual([i.version for i in inventories], ["1.0", "2.0"])
        self.assertEqual(service.requested, ["/c", "/a", "/b"])

    def test_members_are_bound_to_the_client(self):
        service = FakeService(self.documents)
        for inventory in list_referenced_software_inventories(service.client, "/c"):
            self.assertIs(inventory.entity.client, service.client)

    def test_failing_member_fails_the_listing(self):
        error = TransportError("GET /b failed", uri="/b", status_code=500)
        service = FakeService(self.documents, failing={"/b": error})

        with self.assertRaises(TransportError) as ctx:
            list_referenced_software_inventories(service.client, "/c")
        self.assertIs(ctx.exception, error)

    def test_undecodable_member_fails_the_listing(self):
        self.documents["/b"] = b'{"Version": 2}'
        service = FakeService(self.documents)

        with self.assertRaises(DecodeError):
            list_referenced_software_inventories(service.client, "/c")

    def test_empty_collection_uri(self):
        client = MagicMock()
        self.assertEqual(list_referenced_software_inventories(client, ""), [])
        client.get.assert_not_called()

    def test_empty_members(self):
        service = FakeService({"/c": b'{"Members": [], "Members@odata.count": 0}'})
        self.assertEqual(list_referenced_software_inventories(service.client, "/c"), [])
        self.assertEqual(service.requested, ["/c"])

    def test_envelope_failure(self):
        service = FakeService({}, failing={"/c": TransportError("unreachable", uri="/c")})
        with self.assertRaises(TransportError):
            list_referenced_software_inventories(service.client, "/c")

    def test_generic_resolver_with_other_decoder(self):
        documents = {
            "/services": b'{"Members": ["/services/1"]}',
            "/services/1": b'{"@odata.id": "/services/1", "ServiceEnabled": true}',
        }
        service = FakeService(documents)

        services = list_referenced(service.client, "/services", decode_update_service)
        self.assertEqual(len(services), 1)
        self.assertTrue(services[0].service_enabled)


class TestCollectionMemberLinks(unittest.TestCase):
    """Envelope decoding and paging."""

    def test_paged_collection(self):
        documents = {
            "/c": b'{"Members": [{"@odata.id": "/a"}], "Members@odata.count": 2, '
                  b'"Members@odata.nextLink": "/c?$skip=1"}',
            "/c?$skip=1": b'{"Members": [{"@odata.id": "/b"}], "Members@odata.count": 2}',
        }
        service = FakeService(documents)

        self.assertEqual(collection_member_links(service.client, "/c"), ["/a", "/b"])
        service.client.get.assert_has_calls([call("/c"), call("/c?$skip=1")])

    def test_next_link_cycle(self):
        service = FakeService({"/c": b'{"Members": [], "Members@odata.nextLink": "/c"}'})
        with self.assertRaises(DecodeError):
            collection_member_links(service.client, "/c")

    def test_null_members(self):
        service = FakeService({"/c": b'{"Members": null, "Members@odata.count": 0}'})
        self.assertEqual(collection_member_links(service.client, "/c"), [])

    def test_invalid_members(self):
        for envelope in (b'{"Members": [{"href": "/a"}]}', b'{"Members": [null]}',
                         b'{"Members": [{"@odata.id": ""}]}', b'{"Members": {"@odata.id": "/a"}}',
                         b'{"Members": '):
            with self.subTest(envelope=envelope):
                service = FakeService({"/c": envelope})
                with self.assertRaises(DecodeError):
                    collection_member_links(service.client, "/c")


if __name__ == "__main__":
    unittest.main()
