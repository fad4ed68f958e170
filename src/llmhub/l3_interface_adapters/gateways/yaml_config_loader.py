"""Gateway: YAML configuration reader."""

from __future__ import annotations

from pathlib import Path

import yaml

from llmhub.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS


class YamlConfigLoader:
    """Reads the user's YAML settings as a plain mapping; validation happens in L4."""

    def __init__(self, search_paths: list[Path] | None = None) -> None:
        self._search_paths = search_paths if search_paths is not None else DEFAULT_CONFIG_PATHS

    def load(self, config_path: str | None = None, overrides: dict | None = None) -> dict:
        """Return the YAML mapping from *config_path* (or the first existing default path) with *overrides* applied."""
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
        else:
            path = next((p for p in self._search_paths if p.exists()), None)

        data = _read_mapping(path) if path is not None else {}
        return merge_layers(data, overrides or {})


def _read_mapping(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Config file {path} must contain a mapping, got {type(data).__name__}')
    return data


def merge_layers(*layers: dict) -> dict:
    """Combine mappings left to right into a new dict; nested mappings merge key by key."""
    result: dict = {}
    for layer in layers:
        for key, value in layer.items():
            current = result.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                result[key] = merge_layers(current, value)
            elif isinstance(value, dict):
                result[key] = merge_layers(value)
            else:
                result[key] = value
    return result
