"""Postman Collection v2.1 source.

Reads an exported collection back into endpoint descriptors, so an
existing collection can be rebuilt in the canonical shape.
"""

import json
import logging
from pathlib import Path
from urllib.parse import parse_qsl, urlsplit

from pydantic import ValidationError

from .base import DescriptorSet, EndpointDescriptor, HeaderParam, read_source
from .errors import DescriptorError
from api_collection.config import settings

logger = logging.getLogger(__name__)


def parse_postman(file_path: Path) -> DescriptorSet:
    """Parse a Postman Collection v2.1 file into a DescriptorSet."""
    text = read_source(file_path)
    try:
        collection = json.loads(text)
    except json.JSONDecodeError as e:
        raise DescriptorError(str(file_path), f"not valid JSON: {e}") from e
    if not isinstance(collection, dict):
        raise DescriptorError(str(file_path), "expected a JSON object at the top level")

    descriptors: list[EndpointDescriptor] = []
    _parse_items(collection.get("item") or [], descriptors)
    logger.info("Parsed %d requests from %s", len(descriptors), file_path)

    info = collection.get("info")
    name = info.get("name") if isinstance(info, dict) else None
    return DescriptorSet(name=name, descriptors=descriptors)


def _parse_items(items: list[dict], descriptors: list[EndpointDescriptor]) -> None:
    """Recursively parse items, flattening folders."""
    if not isinstance(items, list):
        raise DescriptorError("item", f"expected a list, got {type(items).__name__}")
    for item in items:
        if not isinstance(item, dict):
            raise DescriptorError("item", f"expected an object, got {type(item).__name__}")
        if "item" in item:
            _parse_items(item["item"] or [], descriptors)
        elif "request" in item:
            try:
                descriptors.append(_parse_request(item))
            except ValidationError as e:
                raise DescriptorError(str(item.get("name", "<unnamed>")), str(e)) from e
            except (AttributeError, TypeError, KeyError) as e:
                raise DescriptorError(str(item.get("name", "<unnamed>")), f"malformed request: {e!r}") from e


def _parse_request(item: dict) -> EndpointDescriptor:
    req = item["request"]
    # v2.1 allows a request to be just its URL
    if isinstance(req, str):
        req = {"url": req}

    url = req.get("url") or {}
    if isinstance(url, str):
        url = {"raw": url}

    host = url.get("host") or []
    if isinstance(host, str):
        host = [host]
    path = url.get("path") or []
    if isinstance(path, str):
        path = [path]
    query = url.get("query") or []

    if not host and url.get("raw"):
        host, path, query = _split_raw(url["raw"])

    return EndpointDescriptor(
        base_url=".".join(host) if host else settings.default_base_url,
        method=req.get("method", "GET").upper(),
        path=_item_path(item.get("name") or "", path),
        body=_parse_body(req.get("body")),
        headers=_parse_headers(req.get("header") or []),
        params=[q["key"] for q in query if q.get("key")],
    )


def _split_raw(raw: str) -> tuple[list[str], list[str], list[dict]]:
    """Split a raw URL string into host, path segments and query entries."""
    parts = urlsplit(raw)
    host = f"{parts.scheme}://{parts.netloc}" if parts.netloc else ""
    path = [s for s in parts.path.split("/") if s]
    query = [{"key": k} for k, _ in parse_qsl(parts.query, keep_blank_values=True)]
    return ([host] if host else []), path, query


def _item_path(name: str, path: list[str]) -> str:
    # Collections built by this package name items after their path template
    if name.startswith("/"):
        return name
    return "/" + "/".join(path)


def _parse_headers(headers: list[dict]) -> list[HeaderParam]:
    return [HeaderParam(key=h.get("key", ""), value=h.get("value") or "") for h in headers]


def _parse_body(body: dict | None) -> str:
    if not body or body.get("mode") != "raw":
        return ""
    return body.get("raw") or ""
