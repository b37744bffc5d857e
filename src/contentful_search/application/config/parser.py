"""
ConfigParser - Spaces Configuration Validation

Turns the raw spaces configuration string into SpaceDescriptor objects.
The input must be a JSON array of objects:

    [
        {"name": "Blog", "spaceId": "abc123", "accessToken": "...", "environment": "staging"},
        {"name": "Docs", "spaceId": "def456", "accessToken": "..."}
    ]

Validation order:
- Blank input                    -> EmptyConfigError
- Invalid JSON / not an array    -> MalformedConfigError
- Empty array                    -> EmptyConfigError
- Element not an object          -> InvalidSpaceEntryError(index)
- name/spaceId/accessToken bad   -> InvalidSpaceEntryError(index, field)

Parsing is pure: no I/O, output order equals input order.

Example:
    >>> spaces = parse_space_configs('[{"name": "Blog", "spaceId": "abc", "accessToken": "t"}]')
    >>> spaces[0].environment
    'master'
"""

from __future__ import annotations

import json
from typing import Any

from contentful_search.domain.entities import DEFAULT_ENVIRONMENT, SpaceDescriptor
from contentful_search.shared.exceptions import (
    EmptyConfigError,
    InvalidSpaceEntryError,
    MalformedConfigError,
)

# Required string fields, in the order they are checked
REQUIRED_FIELDS = ("name", "spaceId", "accessToken")


def parse_space_configs(raw: str | None) -> list[SpaceDescriptor]:
    """
    Parse and validate space configurations from a JSON string.

    Args:
        raw: JSON string containing an array of space configurations

    Returns:
        List of SpaceDescriptor, same order as the input array

    Raises:
        EmptyConfigError: Input is blank or the array is empty
        MalformedConfigError: Input is not JSON or not an array
        InvalidSpaceEntryError: An element is not an object or lacks a field
    """
    if not raw or not raw.strip():
        raise EmptyConfigError()

    try:
        configs = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedConfigError(f"Invalid JSON in spaces configuration: {e.msg}") from e

    if not isinstance(configs, list):
        raise MalformedConfigError("Spaces configuration must be a JSON array.")

    if not configs:
        raise EmptyConfigError("At least one space must be configured.")

    return [_parse_space(config, index) for index, config in enumerate(configs)]


def _parse_space(config: Any, index: int) -> SpaceDescriptor:
    if not isinstance(config, dict):
        raise InvalidSpaceEntryError(index)

    for field_name in REQUIRED_FIELDS:
        value = config.get(field_name)
        if not value or not isinstance(value, str):
            raise InvalidSpaceEntryError(index, field_name)

    environment = config.get("environment")
    return SpaceDescriptor(
        name=config["name"],
        space_id=config["spaceId"],
        access_token=config["accessToken"],
        environment=environment if isinstance(environment, str) else DEFAULT_ENVIRONMENT,
    )
