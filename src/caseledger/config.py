from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator


class HarnessConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    fail_on_error: bool = False
    cases: list[str] = []
    verbose: bool = False

    @field_validator("cases")
    @classmethod
    def case_names_must_be_unique(cls, v: list[str]) -> list[str]:
        duplicates = sorted({name for name in v if v.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate case names: {', '.join(duplicates)}")
        return v


def load_config(path: Path) -> HarnessConfig:
    """Load and validate a harness config from a YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return HarnessConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return HarnessConfig(**raw)
