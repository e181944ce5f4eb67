"""Validates serialized collections against the v2.1 record models."""

import json

from pydantic import ValidationError

from api_collection.collection.models import SCHEMA_V2_1_0, Collection


def validate_collection(text: str) -> list[str]:
    """Check collection JSON text.

    Returns a list of problem descriptions; empty when the text parses into
    a v2.1.0 collection whose URLs are consistent with their hosts.
    """
    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        return [f"JSONDecodeError: {e.msg} (line {e.lineno})"]

    try:
        collection = Collection.model_validate_json(text)
    except ValidationError as e:
        return [_format_error(err) for err in e.errors()]

    errors = []
    if collection.info.schema_ != SCHEMA_V2_1_0:
        errors.append(f"info.schema: unsupported schema {collection.info.schema_!r}")

    for index, item in enumerate(collection.item):
        url = item.request.url
        if url.host and not url.raw.startswith(url.host[0]):
            errors.append(f"item.{index}.request.url.raw: {url.raw!r} does not start with host {url.host[0]!r}")
    return errors


def _format_error(err: dict) -> str:
    loc = ".".join(str(p) for p in err["loc"])
    return f"{loc}: {err['msg']}"
