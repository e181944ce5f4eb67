"""Descriptor file loader.

Reads a YAML (or JSON) file listing API endpoints into EndpointDescriptor
models. Top-level keys are ``name``, ``base_url`` and the ``apis`` list.
"""

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import DescriptorSet, EndpointDescriptor, HeaderParam, read_source
from .errors import DescriptorError
from api_collection.config import settings

logger = logging.getLogger(__name__)


def load_descriptors(file_path: Path) -> DescriptorSet:
    """Load a descriptor file into a DescriptorSet."""
    text = read_source(file_path)
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DescriptorError(str(file_path), f"not valid YAML/JSON: {e}") from e

    if not isinstance(doc, dict):
        raise DescriptorError(str(file_path), "expected a mapping at the top level")
    apis = doc.get("apis")
    if not isinstance(apis, list):
        raise DescriptorError(str(file_path), "missing 'apis' list")

    default_base_url = doc.get("base_url") or settings.default_base_url
    descriptors = []
    for index, api in enumerate(apis):
        if not isinstance(api, dict):
            raise DescriptorError(str(file_path), f"apis[{index}] is not a mapping")
        try:
            descriptors.append(_parse_api(api, default_base_url))
        except ValidationError as e:
            raise DescriptorError(str(file_path), f"apis[{index}]: {_first_error(e)}") from e
        except DescriptorError as e:
            raise DescriptorError(str(file_path), f"apis[{index}]: {e}") from e

    logger.info("Loaded %d descriptors from %s", len(descriptors), file_path)
    return DescriptorSet(name=doc.get("name"), descriptors=descriptors)


def _parse_api(api: dict, default_base_url: str) -> EndpointDescriptor:
    method = api.get("method", "GET")
    return EndpointDescriptor(
        base_url=api.get("base_url") or default_base_url,
        method=method.upper() if isinstance(method, str) else method,
        path=api.get("path", ""),
        body=_body_text(api.get("body")),
        headers=_parse_headers(api.get("headers")),
        params=api.get("params") or [],
    )


def _body_text(body) -> str:
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    return str(body)


def _parse_headers(headers) -> list[HeaderParam]:
    if not headers:
        return []
    if isinstance(headers, dict):
        pairs = list(headers.items())
    elif not isinstance(headers, list):
        raise DescriptorError("headers", f"expected a list or a mapping, got {type(headers).__name__}")
    else:
        pairs = [(h.get("key"), h.get("value")) if isinstance(h, dict) else (h, None) for h in headers]
    return [HeaderParam(key=k, value="" if v is None else str(v)) for k, v in pairs]


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]
