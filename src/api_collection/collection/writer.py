"""Serialize collections to Postman JSON."""

import logging
from pathlib import Path

from api_collection.collection.models import Collection

logger = logging.getLogger(__name__)


def dump_collection(collection: Collection, indent: int | None = 2) -> str:
    """Render a collection as Postman v2.1 JSON text."""
    return collection.model_dump_json(by_alias=True, indent=indent)


def write_collection(collection: Collection, output: Path, indent: int | None = 2) -> Path:
    """Write a collection to ``output`` as UTF-8 JSON and return the path."""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_collection(collection, indent=indent) + "\n", encoding="utf-8")
    logger.info("Wrote %d items to %s", len(collection.item), output)
    return output
