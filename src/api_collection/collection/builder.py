"""Build Postman collection records from endpoint descriptors.

Every builder here is a pure function over its arguments: no I/O, no
shared state, and no input is rejected.
"""

import logging
import posixpath
from collections.abc import Sequence

from api_collection.collection.models import (
    SCHEMA_V2_1_0,
    Body,
    Collection,
    Header,
    Info,
    Item,
    ProtocolProfileBehavior,
    QueryParam,
    Request,
    Url,
)
from api_collection.descriptor.base import EndpointDescriptor

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


def build_url(host: str, path_template: str, query_names: Sequence[str]) -> Url:
    """Build the URL record for ``host`` + ``path_template``.

    Empty path segments are dropped. A query name is left out when it occurs
    anywhere in the unsplit template, so ``id`` is dropped for ``/users/{id}``
    but also ``us`` for ``/users``.
    """
    segments = [s for s in path_template.split(PATH_SEPARATOR) if s != ""]
    raw = posixpath.join(host, *segments)

    query = []
    for name in query_names:
        if name in path_template:
            logger.debug("Dropping query param %r: found in path %r", name, path_template)
            continue
        query.append(build_query_param(name))

    return Url(raw=raw, host=[host], path=segments, query=query)


def build_query_param(key: str) -> QueryParam:
    return QueryParam(key=key, value="", disabled=True, description="")


def build_header(key: str, value: str) -> Header:
    return Header(key=key, value=value, type="text", name=key)


def build_body(raw: str) -> Body:
    return Body(mode="raw", raw=raw)


def build_item(descriptor: EndpointDescriptor) -> Item:
    """Build one collection item; its name is the path template as given."""
    headers = [build_header(h.key, h.value) for h in descriptor.headers]
    body = build_body(descriptor.body)
    url = build_url(descriptor.base_url, descriptor.path, descriptor.params)

    logger.debug("Built item %s %s -> %s", descriptor.method, descriptor.path, url.raw)
    return Item(
        name=descriptor.path,
        request=Request(method=descriptor.method, header=headers, body=body, url=url),
        response=None,
        protocol_profile_behavior=ProtocolProfileBehavior(disable_body_pruning=True),
    )


def build_document(name: str, descriptors: Sequence[EndpointDescriptor]) -> Collection:
    """Build a collection with one item per descriptor, in input order."""
    items = [build_item(d) for d in descriptors]
    logger.info("Built collection %r with %d items", name, len(items))
    return Collection(
        info=Info(postman_id="", name=name, schema_=SCHEMA_V2_1_0),
        item=items,
    )
