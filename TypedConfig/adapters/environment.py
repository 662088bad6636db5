"""
Read-only adapter exposing process environment variables as a flat tree.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from TypedConfig.adapters.base import PersistenceAdapter
from TypedConfig.exceptions import PersistFailedError


class EnvironmentAdapter(PersistenceAdapter):
    """
    Loads ``os.environ`` (or a given mapping) as flat keys.

    With a ``prefix`` only matching variables are loaded and the prefix is
    removed from their names. Reloading re-reads the environment. Saving is
    not supported.
    """

    name = "environment"
    requires_path = False
    read_only = True

    def __init__(self, prefix: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        self.prefix = prefix
        self._environ = environ

    def load(self, source: Optional[Path] = None) -> Dict[str, Any]:
        environ = os.environ if self._environ is None else self._environ
        if not self.prefix:
            return dict(environ)
        return {key[len(self.prefix):]: value
                for key, value in environ.items()
                if key.startswith(self.prefix) and len(key) > len(self.prefix)}

    def store(self, tree: Mapping[str, Any], destination: Path) -> None:
        raise PersistFailedError(
            "Saving is not supported for environment configuration",
            context={"adapter": self.name, "path": str(destination)},
        )
