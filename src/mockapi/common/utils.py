"""
MockAPI Common Utilities

Shared helpers for loading endpoint definitions and reading settings from
the environment.
"""

import json
import os
from pathlib import Path
from typing import List, Dict, Any, Optional

import yaml


def get_seed_from_env() -> Optional[int]:
    """
    Read the default random seed from the MOCKAPI_SEED environment variable.

    Returns:
        Integer seed, or None if the variable is unset or empty

    Raises:
        ValueError: If the variable is set but not an integer
    """
    raw = os.environ.get('MOCKAPI_SEED', '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"MOCKAPI_SEED must be an integer, got {raw!r}")


class EndpointLoader:
    """
    Loader for endpoint definition files.

    Handles the layouts a definition file may use:
    - Format 1: {"collections": [{"name": ..., "endpoints": [...]}]}
    - Format 2: {"endpoints": [...]}
    - Format 3: [...]                (direct list of endpoints)

    Files ending in .yaml/.yml are read with PyYAML, everything else as JSON.
    Endpoints loaded from a collection get a ``collection`` key holding the
    collection name.

    Example:
        loader = EndpointLoader("endpoints.yaml")
        endpoints = loader.load()

        for endpoint in endpoints:
            print(endpoint['method'], endpoint['path'])
    """

    def __init__(self, file_path: str):
        """
        Initialize endpoint loader.

        Args:
            file_path: Path to endpoint definition file
        """
        self.file_path = Path(file_path)

    def _read(self) -> Any:
        with open(self.file_path, 'r', encoding='utf-8') as f:
            if self.file_path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(f)
            return json.load(f)

    def load(self) -> List[Dict[str, Any]]:
        """
        Load endpoint definitions from file.

        Returns:
            List of endpoint dictionaries

        Raises:
            FileNotFoundError: If definition file doesn't exist
            ValueError: If the file layout is unrecognized
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Endpoint file not found: {self.file_path}")

        data = self._read()

        if isinstance(data, dict):
            if 'collections' in data:
                endpoints = []
                for collection in data['collections'] or []:
                    for endpoint in collection.get('endpoints') or []:
                        endpoints.append({'collection': collection.get('name', ''), **endpoint})
                return endpoints
            elif 'endpoints' in data:
                return list(data['endpoints'] or [])
            else:
                raise ValueError(
                    f"Unexpected format in {self.file_path}. "
                    f"Expected dict with 'collections' or 'endpoints' key, "
                    f"or a list of endpoints. Found keys: {list(data.keys())}"
                )
        elif isinstance(data, list):
            return data
        else:
            raise ValueError(
                f"Unexpected format in {self.file_path}. "
                f"Expected dict or list, got {type(data).__name__}"
            )
