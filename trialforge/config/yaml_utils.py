"""YAML loading with duplicate-key rejection.

A block configuration with the same key twice (two ``soa:`` entries, say)
would otherwise load silently with the last value winning.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TextIO, Union

import yaml


class UniqueKeyLoader(yaml.SafeLoader):
    """Safe YAML loader that rejects duplicate mapping keys."""


def _construct_unique_mapping(
    loader: UniqueKeyLoader, node: yaml.MappingNode, deep: bool = False
) -> dict:
    loader.flatten_mapping(node)
    mapping = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            line = key_node.start_mark.line + 1
            raise ValueError(f"Duplicate key '{key}' detected in YAML (line {line}).")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_unique_mapping,
)


def load_yaml(stream: Union[str, TextIO]) -> Any:
    """Parse YAML text or a file-like object.

    Raises:
        ValueError: If a mapping contains the same key twice.
    """
    return yaml.load(stream, Loader=UniqueKeyLoader)


def load_yaml_file(path: Union[str, Path]) -> Any:
    """Load a YAML file from disk.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is empty or contains duplicate keys.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = load_yaml(f)
    if not data:
        raise ValueError(f"Empty or invalid config file: {path}")
    return data
