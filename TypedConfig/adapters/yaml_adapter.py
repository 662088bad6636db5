"""
Adapter for YAML files, backed by PyYAML's safe loader and dumper.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from TypedConfig.adapters.base import PersistenceAdapter


class YamlAdapter(PersistenceAdapter):
    name = "yaml"

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load(self, source: Optional[Path]) -> Dict[str, Any]:
        with open(source, 'r', encoding=self.encoding) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {source}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"YAML root of {source} must be a mapping, found {type(data).__name__}")
        return data

    def store(self, tree: Mapping[str, Any], destination: Path) -> None:
        with open(destination, 'w', encoding=self.encoding) as f:
            yaml.safe_dump(dict(tree), f, default_flow_style=False, sort_keys=False)
