"""
Pydantic models for the watchdog inputs.

The endpoint list and the recipient list are both plain JSON documents:

    server_list.json:  [{"target_url": "https://...", "server_name": "api-1"}, ...]
    EMAIL_LIST:        {"emails": ["ops@example.com", ...]}

Field aliases match those documents; the Python side uses `url` / `name`.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from server_watchdog.errors import ConfigurationError


class EndpointDescriptor(BaseModel):
    """A named network target. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(alias="target_url", min_length=1)
    name: str = Field(alias="server_name", min_length=1)


class EndpointList(RootModel[List[EndpointDescriptor]]):
    """Top-level server list document."""

    pass


class RecipientList(BaseModel):
    """Alert recipients, in the order they should be emailed."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    emails: List[str]


def parse_endpoints(raw: str) -> List[EndpointDescriptor]:
    """
    Parse a JSON array of endpoint objects.

    Raises:
        ConfigurationError: If the document is not a valid endpoint list
    """
    try:
        data = EndpointList.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid server list: {e}") from e
    return list(data.root)


def parse_recipient_list(raw: str) -> RecipientList:
    """
    Parse the recipient source, a JSON object with an "emails" key.

    Raises:
        ConfigurationError: If the JSON is malformed or "emails" is missing
    """
    try:
        return RecipientList.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid recipient list: {e}") from e
