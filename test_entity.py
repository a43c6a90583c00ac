#!/usr/bin/env python3
"""
Tests for the entity base: fetch, client binding and change detection.
"""

import unittest
from unittest.mock import MagicMock

from redfish_lib import Entity, RedfishError, TransportError, decode_update_service, fetch
from redfish_lib.models import OpaqueBlob


PAYLOAD = b'{"@odata.id": "/redfish/v1/UpdateService", "Name": "Update Service", "ServiceEnabled": true}'


class TestFetch(unittest.TestCase):
    """fetch() reads, decodes and binds the client."""

    def test_fetch_binds_client(self):
        client = MagicMock()
        client.get.return_value = PAYLOAD

        update_service = fetch(client, "/redfish/v1/UpdateService", decode_update_service)

        client.get.assert_called_once_with("/redfish/v1/UpdateService")
        self.assertIs(update_service.entity.client, client)
        self.assertEqual(update_service.entity.raw_data, PAYLOAD)
        self.assertEqual(update_service.entity.name, "Update Service")

    def test_fetch_empty_uri(self):
        client = MagicMock()
        with self.assertRaises(RedfishError):
            fetch(client, "", decode_update_service)
        client.get.assert_not_called()

    def test_transport_error_propagates(self):
        client = MagicMock()
        client.get.side_effect = TransportError("connection refused", uri="/redfish/v1/UpdateService")

        with self.assertRaises(TransportError):
            fetch(client, "/redfish/v1/UpdateService", decode_update_service)


class TestEntity(unittest.TestCase):
    """Identity, equality and change detection."""

    def test_equality_ignores_client(self):
        first = decode_update_service(PAYLOAD, MagicMock())
        second = decode_update_service(PAYLOAD)

        self.assertEqual(first.entity, second.entity)
        self.assertEqual(first, second)

    def test_different_raw_data_is_not_equal(self):
        first = Entity(odata_id="/a", raw_data=b'{"@odata.id": "/a"}')
        second = Entity(odata_id="/a", raw_data=b'{"@odata.id":"/a"}')
        self.assertNotEqual(first, second)

    def test_set_client(self):
        update_service = decode_update_service(PAYLOAD)
        self.assertIsNone(update_service.entity.get_client())

        client = MagicMock()
        update_service.entity.set_client(client)
        self.assertIs(update_service.entity.client, client)

    def test_has_changed(self):
        client = MagicMock()
        client.get.return_value = PAYLOAD
        update_service = decode_update_service(PAYLOAD, client)

        self.assertFalse(update_service.entity.has_changed())
        client.get.assert_called_once_with("/redfish/v1/UpdateService")

        client.get.return_value = PAYLOAD.replace(b"true", b"false")
        self.assertTrue(update_service.entity.has_changed())

    def test_has_changed_needs_client_and_uri(self):
        with self.assertRaises(RedfishError):
            decode_update_service(PAYLOAD).entity.has_changed()
        with self.assertRaises(RedfishError):
            decode_update_service(b'{}', MagicMock()).entity.has_changed()


class TestOpaqueBlob(unittest.TestCase):

    def test_empty_blob(self):
        blob = OpaqueBlob("Test.Oem")
        self.assertFalse(blob)
        self.assertEqual(blob.data, b"")
        self.assertIsNone(blob.value())

    def test_blob_value(self):
        blob = OpaqueBlob("Test.Oem", b'{"b": 1, "a": [true, null]}')
        self.assertTrue(blob)
        self.assertEqual(blob.value(), {"b": 1, "a": [True, None]})
        self.assertEqual(blob.origin, "Test.Oem")


if __name__ == "__main__":
    unittest.main()
