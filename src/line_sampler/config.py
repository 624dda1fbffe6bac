from dataclasses import asdict, dataclass
from pathlib import Path

import yaml

DEFAULT_SETTINGS_PATH = Path("line_sampler.yaml")


@dataclass(frozen=True)
class SamplerSettings:
    input_path: str = ""
    output_path: str = ""
    count: int = 10
    include_timestamp: bool = True


def _require_mapping(data: object, settings_path: Path) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings at '{settings_path}' must be a YAML mapping.")
    return data


def _optional_str(data: dict, key: str, default: str, settings_path: Path) -> str:
    value = data.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"Settings key '{key}' in '{settings_path}' must be a string.")
    return value.strip()


def _optional_positive_int(data: dict, key: str, default: int, settings_path: Path) -> int:
    value = data.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"Settings key '{key}' in '{settings_path}' must be a positive integer.")
    return value


def _optional_bool(data: dict, key: str, default: bool, settings_path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Settings key '{key}' in '{settings_path}' must be a boolean.")
    return value


def load_settings(settings_path: Path = DEFAULT_SETTINGS_PATH) -> SamplerSettings:
    if not settings_path.exists():
        return SamplerSettings()

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    data = _require_mapping(raw, settings_path)
    defaults = SamplerSettings()
    return SamplerSettings(
        input_path=_optional_str(data, "input_path", defaults.input_path, settings_path),
        output_path=_optional_str(data, "output_path", defaults.output_path, settings_path),
        count=_optional_positive_int(data, "count", defaults.count, settings_path),
        include_timestamp=_optional_bool(
            data, "include_timestamp", defaults.include_timestamp, settings_path
        ),
    )


def save_settings(settings: SamplerSettings, settings_path: Path = DEFAULT_SETTINGS_PATH) -> None:
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    with settings_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(asdict(settings), f, sort_keys=False, allow_unicode=True)
