"""Postman Collection v2.1 record models.

Field names are snake_case; the JSON names used by Postman are set as
aliases, so ``model_dump(by_alias=True)`` produces the on-disk shape.
"""

from pydantic import BaseModel, ConfigDict, Field, model_serializer

SCHEMA_V2_1_0 = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Header(_Record):
    """A single request header entry."""

    key: str
    value: str
    type: str = "text"
    name: str = ""

    @model_serializer(mode="wrap")
    def _omit_empty_name(self, handler):
        data = handler(self)
        if not self.name:
            data.pop("name", None)
        return data


class QueryParam(_Record):
    """A query-string entry. Built disabled, so clients list it but do not send it."""

    key: str
    value: str = ""
    disabled: bool = True
    description: str = ""

    @model_serializer(mode="wrap")
    def _omit_empty_description(self, handler):
        data = handler(self)
        if not self.description:
            data.pop("description", None)
        return data


class Body(_Record):
    mode: str = "raw"
    raw: str = ""


class Url(_Record):
    """Canonical URL: raw host+path string plus its host, path and query parts."""

    raw: str
    host: list[str]
    path: list[str] = []
    query: list[QueryParam] = []


class Request(_Record):
    method: str
    header: list[Header] = []
    body: Body
    url: Url


class ProtocolProfileBehavior(_Record):
    disable_body_pruning: bool = Field(False, alias="disableBodyPruning")


class Item(_Record):
    """One request entry of a collection."""

    name: str
    request: Request
    response: list | None = None
    protocol_profile_behavior: ProtocolProfileBehavior | None = Field(
        None, alias="protocolProfileBehavior"
    )

    @model_serializer(mode="wrap")
    def _omit_unset_behavior(self, handler, info):
        data = handler(self)
        if self.protocol_profile_behavior is None:
            data.pop("protocolProfileBehavior" if info.by_alias else "protocol_profile_behavior", None)
        return data


class Info(_Record):
    postman_id: str = Field("", alias="_postman_id")
    name: str
    schema_: str = Field(SCHEMA_V2_1_0, alias="schema")


class Collection(_Record):
    """Top-level collection document."""

    info: Info
    item: list[Item] = []
