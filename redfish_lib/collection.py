"""
Resolution of Redfish resource collections.
"""

from typing import List, Optional

from pydantic import Field

from .constants import MEMBERS, MEMBERS_COUNT, MEMBERS_NEXT_LINK
from .decoder import parse_record
from .entity import Client, Decoder, R, fetch
from .errors import DecodeError
from .link import Link, RequiredLink
from .models import ResourceRecord


class CollectionRecord(ResourceRecord):
    """A collection envelope: its members are links, in service order."""
    members: Optional[List[RequiredLink]] = Field(default=None, alias=MEMBERS)
    members_count: Optional[int] = Field(default=None, alias=MEMBERS_COUNT)
    next_link: Link = Field(default="", alias=MEMBERS_NEXT_LINK)


def collection_member_links(client: Client, collection_uri: str) -> List[str]:
    """
    Fetch a collection envelope and return its member URIs in order.

    Pages announced through ``Members@odata.nextLink`` are fetched one after
    another and their members appended.
    """
    links = []
    seen = set()
    uri = collection_uri
    while uri:
        if uri in seen:
            raise DecodeError(f"Collection {collection_uri} links back to page {uri}")
        seen.add(uri)
        envelope = parse_record(client.get(uri), CollectionRecord)
        links.extend(envelope.members or ())
        uri = envelope.next_link
    return links


def list_referenced(client: Client, collection_uri: str, decode: Decoder) -> List[R]:
    """
    Materialize every member of a collection.

    An empty ``collection_uri`` means the resource links no collection: the
    result is empty and nothing is fetched. Members are fetched in envelope
    order; the first failure aborts the whole listing.
    """
    if not collection_uri:
        return []
    return [fetch(client, uri, decode) for uri in collection_member_links(client, collection_uri)]
