"""
Adapter for JSON files.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from TypedConfig.adapters.base import PersistenceAdapter


class JsonAdapter(PersistenceAdapter):
    name = "json"

    def __init__(self, encoding: str = "utf-8", indent: int = 2):
        self.encoding = encoding
        self.indent = indent

    def load(self, source: Optional[Path]) -> Dict[str, Any]:
        with open(source, 'r', encoding=self.encoding) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"JSON root of {source} must be an object, found {type(data).__name__}")
        return data

    def store(self, tree: Mapping[str, Any], destination: Path) -> None:
        with open(destination, 'w', encoding=self.encoding) as f:
            json.dump(tree, f, indent=self.indent)
            f.write("\n")
