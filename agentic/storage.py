"""JSON document storage for tasks and user config.

Both documents live in the data directory (``AGENTIC_HOME``, default
``~/.agentic``). Reading a missing document writes and returns the defaults.
The whole document is rewritten on every save.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ValidationError

from . import config
from .errors import StorageError
from .models import AgentConfig, AgentState

logger = logging.getLogger(__name__)


def _ensure_data_dir() -> Path:
    directory = config.data_directory()
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def _load_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Invalid JSON in {path}: {exc}") from exc


def _save_json(path: Path, model: BaseModel) -> None:
    _ensure_data_dir()
    serialized = json.dumps(model.model_dump(mode='json', exclude_none=True), indent=2)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(serialized + '\n')


def read_state() -> AgentState:
    _ensure_data_dir()
    path = config.data_file()
    if not path.exists():
        logger.info('no state file at %s; writing defaults', path)
        state = AgentState()
        write_state(state)
        return state
    payload = _load_json(path)
    if not isinstance(payload, dict) or not payload.get('next_id') or not isinstance(payload.get('tasks'), list):
        raise StorageError(f"Invalid state file: {path}")
    try:
        return AgentState.model_validate(payload)
    except ValidationError as exc:
        raise StorageError(f"Invalid state file {path}: {exc}") from exc


def write_state(state: AgentState) -> None:
    _save_json(config.data_file(), state)


def read_config() -> AgentConfig:
    _ensure_data_dir()
    path = config.config_file()
    if not path.exists():
        logger.info('no config file at %s; writing defaults', path)
        cfg = AgentConfig()
        write_config(cfg)
        return cfg
    payload = _load_json(path)
    if not isinstance(payload, dict):
        raise StorageError(f"Invalid config file: {path}")
    # stored values win over defaults; keys added in newer versions get defaults
    merged: Dict[str, Any] = AgentConfig().model_dump()
    merged.update(payload)
    merged['integrations'] = payload.get('integrations') or {}
    try:
        return AgentConfig.model_validate(merged)
    except ValidationError as exc:
        raise StorageError(f"Invalid config file {path}: {exc}") from exc


def write_config(cfg: AgentConfig) -> None:
    _save_json(config.config_file(), cfg)


def state_exists() -> bool:
    return config.data_file().exists()


def config_exists() -> bool:
    return config.config_file().exists()
