"""
Run configuration for the batch runner.

Example YAML:

    precision: 5
    default_algorithm: 3
    output_path: output.txt
    show_progress: false
    log_level: INFO
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML mapping; an empty file gives an empty dict."""
    with Path(path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a YAML mapping, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class InferenceConfig:
    precision: int = 5
    default_algorithm: int = 3
    output_path: str = "output.txt"
    show_progress: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError("precision must be >= 0")
        if self.default_algorithm not in (1, 2, 3):
            raise ValueError("default_algorithm must be 1, 2 or 3")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InferenceConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**data)

    def override(self, **changes: Any) -> "InferenceConfig":
        """Copy with every non-None keyword applied (CLI flags win over the file)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_config(path: Union[str, Path, None] = None) -> InferenceConfig:
    if path is None:
        return InferenceConfig()
    return InferenceConfig.from_dict(load_yaml(path))


__all__ = ["InferenceConfig", "load_config", "load_yaml"]
