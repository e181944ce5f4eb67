"""Endpoint descriptor models.

Every descriptor source (descriptor file, OpenAPI, existing collection)
converts its input into these models before a collection is built.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import DescriptorError


class HeaderParam(BaseModel):
    """A header key/value pair as supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str = ""


class EndpointDescriptor(BaseModel):
    """One API call to be turned into a collection item."""

    model_config = ConfigDict(frozen=True)

    base_url: str  # https://api.example.com
    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str  # /v1/users/{id}
    body: str = ""
    headers: list[HeaderParam] = []
    params: list[str] = []  # query parameter names, no values


class DescriptorSet(BaseModel):
    """Descriptors read from one source, plus the collection name it suggests."""

    name: str | None = None
    descriptors: list[EndpointDescriptor]

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, value):
        # YAML reads `name: 2024` as an int
        if value is None or isinstance(value, str):
            return value
        return str(value)


def read_source(file_path: Path) -> str:
    """Read a source file as UTF-8 text."""
    try:
        return file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DescriptorError(str(file_path), f"not UTF-8 text: {e.reason} at byte {e.start}") from e
