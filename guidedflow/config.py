from __future__ import annotations

import os
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field


class GuidedFlowConfig(BaseModel):
    """Top-level configuration model."""

    database_url: Optional[str] = None
    spec_paths: List[str] = Field(default_factory=list)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    validate_outcome_schema: bool = False


def load_config(path: Optional[str] = None) -> GuidedFlowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to GUIDEDFLOW_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("GUIDEDFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = GuidedFlowConfig(**data)
    else:
        config = GuidedFlowConfig()

    env_db_url = os.getenv("GUIDEDFLOW_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config
