#!/usr/bin/env python3
"""
Redfish update service inspector.

Reads the UpdateService of a Redfish service, lists its firmware and software
inventories, and optionally invokes the SimpleUpdate or StartUpdate actions.
Results are printed to stdout as JSON.
"""

import argparse
import json
import os
import sys
import traceback
from typing import Any, Dict, List, Optional, Tuple, Union
from dotenv import load_dotenv

from redfish_lib import RedfishClient, RedfishError, SoftwareInventory, UpdateService, get_update_service
from redfish_lib.constants import DEFAULT_TIMEOUT, UPDATE_SERVICE_URI

# Load environment variables from .env file
load_dotenv()


def describe_update_service(update_service: UpdateService) -> Dict[str, Any]:
    """Plain dict view of an UpdateService for JSON output."""
    return {
        "@odata.id": update_service.entity.odata_id,
        "@odata.type": update_service.entity.odata_type,
        "Name": update_service.entity.name,
        "ServiceEnabled": update_service.service_enabled,
        "Status": {
            "State": update_service.status.state,
            "Health": update_service.status.health,
        },
        "HttpPushUri": update_service.http_push_uri,
        "MultipartHttpPushUri": update_service.multipart_http_push_uri,
        "MaxImageSizeBytes": update_service.max_image_size_bytes,
        "FirmwareInventory": update_service.firmware_inventory,
        "SoftwareInventory": update_service.software_inventory,
        "TransferProtocol": list(update_service.transfer_protocol),
        "UpdateServiceTarget": update_service.update_service_target,
        "StartUpdateTarget": update_service.start_update_target,
        "OemActions": update_service.oem_actions.value(),
    }


def describe_inventory(inventory: SoftwareInventory) -> Dict[str, Any]:
    """Plain dict view of a SoftwareInventory for JSON output."""
    return {
        "@odata.id": inventory.entity.odata_id,
        "Id": inventory.entity.id,
        "Name": inventory.entity.name,
        "Version": inventory.version,
        "SoftwareId": inventory.software_id,
        "Manufacturer": inventory.manufacturer,
        "Updateable": inventory.updateable,
        "Health": inventory.status.health,
        "RelatedItem": list(inventory.related_items),
    }


def resolve_auth(args: argparse.Namespace) -> Optional[Union[Tuple[str, str], Dict[str, str]]]:
    """
    Pick the credentials to use.

    Priority: --token > REDFISH_TOKEN > basic auth (CLI args > env vars).
    """
    token = args.token or os.getenv("REDFISH_TOKEN")
    if token:
        if args.verbose: print("[VERBOSE] Using X-Auth-Token session authentication.", file=sys.stderr)
        return {"X-Auth-Token": token}

    env_user = os.getenv("REDFISH_USER") or os.getenv("REDFISH_USERNAME")
    env_pass = os.getenv("REDFISH_PASS") or os.getenv("REDFISH_PASSWORD")
    final_user = args.user if args.user is not None else env_user
    final_pass = args.password if args.password is not None else env_pass

    if final_user and final_pass:
        if args.verbose: print(f"[VERBOSE] Using basic authentication for user: {final_user}", file=sys.stderr)
        return (final_user, final_pass)
    if args.verbose:
        print("[VERBOSE] No authentication provided or configured. Attempting anonymous access.", file=sys.stderr)
    return None


def resolve_service_url(args: argparse.Namespace) -> Optional[str]:
    # Priority: --service flag > Positional argument > Environment Variable > .env file
    if args.service_via_flag:
        return args.service_via_flag
    if args.service_url_pos:
        return args.service_url_pos
    return os.getenv("REDFISH_URL")


def collect_inventories(update_service: UpdateService, which: str) -> Dict[str, List[Dict[str, Any]]]:
    result = {}
    if which in ("firmware", "all"):
        result["FirmwareInventory"] = [describe_inventory(i) for i in update_service.firmware_inventories()]
    if which in ("software", "all"):
        result["SoftwareInventory"] = [describe_inventory(i) for i in update_service.software_inventories()]
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Redfish UpdateService inspector",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter  # Show defaults in help
    )
    parser.add_argument("--service", dest="service_via_flag", help="Base URL of the Redfish service, e.g. https://bmc.example.com (overrides positional argument and REDFISH_URL env var)")
    parser.add_argument("service_url_pos", nargs='?', help="Base URL of the Redfish service (alternative to --service flag or env var)")

    auth_group = parser.add_mutually_exclusive_group()
    auth_group.add_argument("-u", "--user", help="Username for basic authentication (overrides REDFISH_USER env var)")
    auth_group.add_argument("--token", help="X-Auth-Token of an existing Redfish session (overrides REDFISH_TOKEN env var)")
    parser.add_argument("-p", "--password", help="Password for basic authentication (overrides REDFISH_PASS env var)")

    parser.add_argument("-v", "--verbose", "--debug", dest="verbose", action="store_true", help="Enable verbose output to stderr")
    parser.add_argument("--verbose-errors", action="store_true", help="Include extended info messages in error output")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification (self-signed BMC certificates)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
    parser.add_argument("--update-service-uri", default=UPDATE_SERVICE_URI, help="URI of the UpdateService resource")
    parser.add_argument("--inventory", choices=["firmware", "software", "all", "none"], default="all", help="Which inventory collections to list")

    parser.add_argument("--simple-update", metavar="IMAGE_URI", help="Invoke SimpleUpdate with this image URI")
    parser.add_argument("--transfer-protocol", help="Transfer protocol for --simple-update (e.g. HTTPS)")
    parser.add_argument("--targets", help="Comma-separated URIs of components to update with --simple-update")
    parser.add_argument("--start-update", action="store_true", help="Invoke StartUpdate")
    parser.add_argument("--trace", action="store_true", help="Print the raw UpdateService payload and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    service_url = resolve_service_url(args)
    if not service_url:
        # Error, print regardless of verbosity
        print("ERROR: Redfish service URL not provided.", file=sys.stderr)
        print("Provide it via the --service flag, as a positional argument, or REDFISH_URL environment variable.", file=sys.stderr)
        parser.print_help(file=sys.stderr)
        return 1

    auth = resolve_auth(args)

    try:
        with RedfishClient(service_url, auth, verbose=args.verbose, verify=not args.insecure,
                           timeout=args.timeout, verbose_errors=args.verbose_errors) as client:
            update_service = get_update_service(client, args.update_service_uri)

            if args.trace:
                print(update_service.entity.raw_data.decode("utf-8", errors="replace"))
                return 0

            output: Dict[str, Any] = {"UpdateService": describe_update_service(update_service)}
            if args.inventory != "none":
                output.update(collect_inventories(update_service, args.inventory))

            if args.simple_update:
                targets = [t.strip() for t in args.targets.split(',') if t.strip()] if args.targets else None
                response = update_service.simple_update(args.simple_update, args.transfer_protocol, targets)
                output["SimpleUpdate"] = {"Status": response.status_code, "Location": response.headers.get("Location")}
            if args.start_update:
                response = update_service.start_update()
                output["StartUpdate"] = {"Status": response.status_code, "Location": response.headers.get("Location")}

            print(json.dumps(output, indent=2))
            return 0
    except (RedfishError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if args.verbose:
            traceback.print_exc(file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
