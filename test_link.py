#!/usr/bin/env python3
"""
Tests for link reference decoding.
"""

import unittest

from redfish_lib.errors import DecodeError
from redfish_lib.link import decode_link
from redfish_lib.updateservice import decode_update_service


class TestDecodeLink(unittest.TestCase):
    """Both JSON encodings of a link reduce to the same URI string."""

    def test_bare_string_and_link_object_match(self):
        uris = ["/redfish/v1/UpdateService/FirmwareInventory", "https://bmc.example.com/redfish/v1", "/"]
        for uri in uris:
            with self.subTest(uri=uri):
                self.assertEqual(decode_link(uri), decode_link({"@odata.id": uri}))
                self.assertEqual(decode_link(uri), uri)

    def test_surrounding_whitespace_is_removed(self):
        self.assertEqual(decode_link("  /redfish/v1/Systems \n"), "/redfish/v1/Systems")
        self.assertEqual(decode_link({"@odata.id": " /redfish/v1/Systems"}), "/redfish/v1/Systems")

    def test_extra_keys_in_link_object_are_ignored(self):
        value = {"@odata.id": "/redfish/v1/Chassis/1", "Oem": {"Vendor": {"Slot": 3}}}
        self.assertEqual(decode_link(value), "/redfish/v1/Chassis/1")

    def test_absent_link_is_empty(self):
        self.assertEqual(decode_link(None), "")
        self.assertEqual(decode_link(""), "")
        self.assertEqual(decode_link({"@odata.id": None}), "")

    def test_required_link_must_be_present(self):
        for value in (None, "", {"@odata.id": None}, {"@odata.id": "   "}):
            with self.subTest(value=value):
                with self.assertRaises(DecodeError):
                    decode_link(value, required=True)
        self.assertEqual(decode_link({"@odata.id": "/a"}, required=True), "/a")

    def test_invalid_shapes_raise_decode_error(self):
        for value in (5, 1.5, True, ["/a"], {}, {"href": "/a"}, {"@odata.id": 7}, {"@odata.id": ["/a"]}):
            with self.subTest(value=value):
                with self.assertRaises(DecodeError):
                    decode_link(value)

    def test_decode_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            decode_link(42)


class TestLinkFields(unittest.TestCase):
    """Link fields of a resource accept both encodings as well."""

    def test_link_field_from_bare_string(self):
        as_string = decode_update_service(b'{"FirmwareInventory": "/x/Fw"}')
        as_object = decode_update_service(b'{"FirmwareInventory": {"@odata.id": "/x/Fw"}}')
        self.assertEqual(as_string.firmware_inventory, "/x/Fw")
        self.assertEqual(as_string.firmware_inventory, as_object.firmware_inventory)

    def test_malformed_link_field_fails_decode(self):
        with self.assertRaises(DecodeError):
            decode_update_service(b'{"FirmwareInventory": {"href": "/x/Fw"}}')
        with self.assertRaises(DecodeError):
            decode_update_service(b'{"SoftwareInventory": 12}')


if __name__ == "__main__":
    unittest.main()
