"""Probe and filter configuration read from the node disk manager config file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import yaml

# Location of the configuration mounted into the daemon's container.
CONFIG_FILE_PATH = "/host/node-disk-manager.config"


def _as_str(value: Any) -> str:
    """Read a scalar config value as text, as the config format expects."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ValueError(f"expected a scalar config value, got {value!r}")
    return str(value)


def _entries(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    entries = data.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValueError(f"{key} must be a list, got {type(entries).__name__}")
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ValueError(f"each entry of {key} must be a mapping, got {entry!r}")
    return entries


@dataclass
class ProbeConfig:
    """Key, name and state of one probe."""

    key: str = ""
    name: str = ""
    state: str = ""


@dataclass
class FilterConfig:
    """Key, name, state and comma separated include/exclude values of one filter."""

    key: str = ""
    name: str = ""
    state: str = ""
    include: str = ""
    exclude: str = ""


@dataclass
class NodeDiskManagerConfig:
    """Configuration of the probes and filters."""

    probe_configs: list[ProbeConfig] = field(default_factory=list)
    filter_configs: list[FilterConfig] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> NodeDiskManagerConfig:
        """Build a configuration from parsed JSON or YAML data."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(
                f"configuration must be a mapping, got {type(data).__name__}"
            )
        probes = [
            ProbeConfig(
                key=_as_str(entry.get("key")),
                name=_as_str(entry.get("name")),
                state=_as_str(entry.get("state")),
            )
            for entry in _entries(data, "probeconfigs")
        ]
        filters = [
            FilterConfig(
                key=_as_str(entry.get("key")),
                name=_as_str(entry.get("name")),
                state=_as_str(entry.get("state")),
                include=_as_str(entry.get("include")),
                exclude=_as_str(entry.get("exclude")),
            )
            for entry in _entries(data, "filterconfigs")
        ]
        return cls(probe_configs=probes, filter_configs=filters)


def load_config(path: str = CONFIG_FILE_PATH) -> NodeDiskManagerConfig:
    """Read the configuration file, as JSON when it is valid JSON, else as YAML.

    Raises OSError when the file cannot be read and ValueError when its
    content cannot be parsed into a configuration.
    """
    with open(path, "rb") as handle:
        data = handle.read()
    try:
        parsed = json.loads(data)
    except ValueError:
        try:
            parsed = yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise ValueError(f"unable to parse config {path}: {exc}") from exc
    return NodeDiskManagerConfig.from_mapping(parsed)