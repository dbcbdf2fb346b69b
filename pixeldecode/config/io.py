from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..utils.optional_deps import require


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a JSON or YAML file whose top level is a mapping.

    YAML (``.yml``/``.yaml``) needs PyYAML, available via the ``yaml`` extra.
    An empty file loads as ``{}``.
    """

    config_path = Path(path)
    suffix = config_path.suffix.lower()

    if suffix == ".json":
        with config_path.open("r", encoding="utf-8") as f:
            text = f.read()
        data = json.loads(text) if text.strip() else None
    elif suffix in (".yml", ".yaml"):
        yaml = require("yaml", purpose=f"reading {config_path.name}")
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    else:
        raise ValueError(
            f"Unsupported config extension {suffix!r} for {str(config_path)!r}. "
            "Supported: .json, .yml, .yaml."
        )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Config must be a mapping at the top level, got {type(data).__name__} "
            f"from {str(config_path)!r}."
        )
    return dict(data)
