"""Configuration for the KNN blocks runtime."""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict
import json
import os

from knnblocks.constants import (
    DATASET_LIST_ID,
    DATASET_LIST_NAME,
    DEFAULT_DISTANCE_METRIC,
    DEFAULT_K,
    DISTANCE_METRICS,
)
from knnblocks.exceptions import ConfigurationError


_DEFAULT_DATA_DIR = ".knnblocks"
_DEFAULT_PERSIST_ON_CHANGE = True


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _coerce_int(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _parse_env_file(path: Path) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = _strip_quotes(value.strip())
    return data


def _load_config_data(path: Path) -> Dict[str, str]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        return {str(k): str(v) for k, v in payload.items()}
    return _parse_env_file(path)


@dataclass
class Config:
    default_k: int = DEFAULT_K
    distance_metric: str = DEFAULT_DISTANCE_METRIC
    dataset_list_name: str = DATASET_LIST_NAME
    dataset_list_id: str = DATASET_LIST_ID
    data_dir: str = _DEFAULT_DATA_DIR
    persist_on_change: bool = _DEFAULT_PERSIST_ON_CHANGE

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            default_k=_coerce_int(os.environ.get("KNN_DEFAULT_K"), DEFAULT_K),
            distance_metric=os.environ.get("KNN_DISTANCE_METRIC", DEFAULT_DISTANCE_METRIC).lower(),
            dataset_list_name=os.environ.get("KNN_DATASET_LIST_NAME", DATASET_LIST_NAME),
            dataset_list_id=os.environ.get("KNN_DATASET_LIST_ID", DATASET_LIST_ID),
            data_dir=os.environ.get("KNNBLOCKS_DATA_DIR", _DEFAULT_DATA_DIR),
            persist_on_change=_coerce_bool(
                os.environ.get("KNN_PERSIST_ON_CHANGE"),
                _DEFAULT_PERSIST_ON_CHANGE,
            ),
        )

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        env_config = cls.from_env()
        if not config_path:
            return env_config

        file_data = _load_config_data(Path(config_path))
        return cls(
            default_k=_coerce_int(file_data.get("KNN_DEFAULT_K"), env_config.default_k),
            distance_metric=file_data.get("KNN_DISTANCE_METRIC", env_config.distance_metric).lower(),
            dataset_list_name=file_data.get("KNN_DATASET_LIST_NAME", env_config.dataset_list_name),
            dataset_list_id=file_data.get("KNN_DATASET_LIST_ID", env_config.dataset_list_id),
            data_dir=file_data.get("KNNBLOCKS_DATA_DIR", env_config.data_dir),
            persist_on_change=_coerce_bool(
                file_data.get("KNN_PERSIST_ON_CHANGE"),
                env_config.persist_on_change,
            ),
        )

    def validate(self) -> "Config":
        if self.default_k < 1:
            raise ConfigurationError("KNN_DEFAULT_K", f"must be at least 1, got {self.default_k}")
        if self.distance_metric not in DISTANCE_METRICS:
            raise ConfigurationError(
                "KNN_DISTANCE_METRIC",
                f"unsupported metric '{self.distance_metric}'. Valid: {', '.join(DISTANCE_METRICS)}",
            )
        if not self.dataset_list_name:
            raise ConfigurationError("KNN_DATASET_LIST_NAME", "must not be empty")
        return self

    def to_dict(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}
