"""OpenAPI / Swagger document source.

Derives endpoint descriptors from OpenAPI 3.x and Swagger 2.0 documents.
Local ``$ref`` pointers (``#/components/...``, ``#/parameters/...``) are
resolved against the same document.
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

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")


def parse_openapi(file_path: Path, base_url: str | None = None) -> DescriptorSet:
    """Parse an OpenAPI/Swagger file into a DescriptorSet."""
    text = read_source(file_path)
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DescriptorError(str(file_path), f"not valid YAML/JSON: {e}") from e
    if not isinstance(doc, dict):
        raise DescriptorError(str(file_path), "expected a mapping at the top level")

    host = base_url or _base_url(doc)
    descriptors = []
    paths = doc.get("paths") or {}

    for path, methods in paths.items():
        try:
            descriptors.extend(_parse_path(doc, host, path, methods))
        except ValidationError as e:
            raise DescriptorError(str(file_path), f"{path}: {e}") from e
        except (AttributeError, TypeError, KeyError) as e:
            raise DescriptorError(str(file_path), f"{path}: malformed operation: {e!r}") from e

    logger.info("Parsed %d operations from %s", len(descriptors), file_path)
    info = doc.get("info")
    name = info.get("title") if isinstance(info, dict) else None
    return DescriptorSet(name=name, descriptors=descriptors)


def _parse_path(doc: dict, host: str, path: str, methods: dict) -> list[EndpointDescriptor]:
    result = []
    shared_params = _resolve_all(doc, methods.get("parameters", []))
    for method, operation in methods.items():
        if method.upper() not in HTTP_METHODS:
            continue

        params = shared_params + _resolve_all(doc, operation.get("parameters", []))
        headers = _parse_header_params(params)
        content_type, body = _parse_body(doc, operation, params)
        if content_type:
            headers.append(HeaderParam(key="Content-Type", value=content_type))

        result.append(
            EndpointDescriptor(
                base_url=host,
                method=method.upper(),
                path=path,
                body=body,
                headers=headers,
                params=[p["name"] for p in params if p.get("in") in ("query", "path")],
            )
        )
    return result


def _base_url(doc: dict) -> str:
    servers = doc.get("servers")
    if servers and servers[0].get("url"):
        return servers[0]["url"]
    # Swagger 2.0
    if doc.get("host"):
        scheme = (doc.get("schemes") or ["https"])[0]
        return f"{scheme}://{doc['host']}{doc.get('basePath', '')}"
    return settings.default_base_url


def _resolve(doc: dict, node):
    """Follow a local ``$ref`` pointer; None when it cannot be resolved."""
    if not isinstance(node, dict) or "$ref" not in node:
        return node
    ref = node["$ref"]
    if not isinstance(ref, str) or not ref.startswith("#/"):
        logger.warning("Skipping non-local reference %r", ref)
        return None

    target = doc
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(target, dict) or part not in target:
            logger.warning("Skipping unresolved reference %r", ref)
            return None
        target = target[part]
    return _resolve(doc, target)


def _resolve_all(doc: dict, params: list) -> list[dict]:
    resolved = [_resolve(doc, p) for p in params]
    return [p for p in resolved if isinstance(p, dict)]


def _parse_header_params(params: list[dict]) -> list[HeaderParam]:
    return [HeaderParam(key=p["name"], value="") for p in params if p.get("in") == "header"]


def _parse_body(doc: dict, operation: dict, params: list[dict]) -> tuple[str | None, str]:
    """Return the Content-Type header value (None for no body) and the example body text."""
    request_body = _resolve(doc, operation.get("requestBody"))
    if request_body:
        content = request_body.get("content", {})
        return _detect_content_type(content), _example_body(doc, content)

    # Swagger 2.0: body and formData parameters
    consumes = operation.get("consumes") or doc.get("consumes") or []
    body_param = next((p for p in params if p.get("in") == "body"), None)
    if body_param is not None:
        schema = _resolve(doc, body_param.get("schema")) or {}
        example = body_param.get("x-example", schema.get("example"))
        return (consumes[0] if consumes else "application/json"), _example_text(example)

    form_params = [p for p in params if p.get("in") == "formData"]
    if form_params:
        if consumes:
            return consumes[0], ""
        if any(p.get("type") == "file" for p in form_params):
            return "multipart/form-data", ""
        return "application/x-www-form-urlencoded", ""

    return None, ""


def _detect_content_type(content: dict) -> str:
    if "application/json" in content or not content:
        return "application/json"
    return next(iter(content))


def _example_body(doc: dict, content: dict) -> str:
    for media in content.values():
        example = media.get("example")
        if example is None:
            example = (_resolve(doc, media.get("schema")) or {}).get("example")
        if example is not None:
            return _example_text(example)
    return ""


def _example_text(example) -> str:
    if example is None:
        return ""
    return example if isinstance(example, str) else json.dumps(example, indent=2, ensure_ascii=False)
