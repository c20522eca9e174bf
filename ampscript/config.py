"""Configuration loading for ampscript (.ampscript.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .components import DEFAULT_CDN_BASE, DEFAULT_LISTING_URL, DEFAULT_PLACEHOLDER
from .models import DetectionMode, InsertionMode
from .stores import load_overrides

CONFIG_FILENAME = ".ampscript.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ValidatorConfig:
    """Settings for the external AMP validator."""

    executable: str = "amphtml-validator"
    timeout: Optional[float] = 60.0


@dataclass
class AmpScriptConfig:
    """Represents the settings defined in .ampscript.yml."""

    root: Path
    placeholder: str = DEFAULT_PLACEHOLDER
    mode: InsertionMode = InsertionMode.PLACEHOLDER
    detection: DetectionMode = DetectionMode.SCANNER
    force_latest: bool = False
    overrides_file: Path | None = None
    overrides: Dict[str, str] = field(default_factory=dict)
    cache_path: Path | None = None
    cdn_base: str = DEFAULT_CDN_BASE
    listing_url: str = DEFAULT_LISTING_URL
    validator: ValidatorConfig = field(default_factory=ValidatorConfig)

    def __post_init__(self) -> None:
        if self.overrides_file is None:
            self.overrides_file = self.root / "amp-versions.json"
        if self.cache_path is None:
            self.cache_path = self.root / ".ampscript" / "components.json"

    def resolved_overrides(self) -> Dict[str, str]:
        """Pinned versions from the overrides file, with inline entries taking priority."""
        merged = load_overrides(self.overrides_file) if self.overrides_file else {}
        merged.update(self.overrides)
        return merged


def load_config(config_path: Path) -> AmpScriptConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AmpScriptConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = AmpScriptConfig(
        root=root,
        placeholder=_as_str(data.get("placeholder")) or DEFAULT_PLACEHOLDER,
        mode=_as_enum(InsertionMode, data.get("mode"), InsertionMode.PLACEHOLDER),
        detection=_as_enum(DetectionMode, data.get("detection"), DetectionMode.SCANNER),
        force_latest=_as_bool(data.get("force_latest")) or False,
        overrides_file=_as_path(root, data.get("overrides_file")),
        overrides=_as_str_map(data.get("overrides")),
        cache_path=_as_path(root, data.get("cache_path")),
        cdn_base=_as_str(data.get("cdn_base")) or DEFAULT_CDN_BASE,
        listing_url=_as_str(data.get("listing_url")) or DEFAULT_LISTING_URL,
    )

    validator_data = _as_dict(data.get("validator"))
    if validator_data:
        executable = _as_str(validator_data.get("executable"))
        if executable:
            config.validator.executable = executable
        if "timeout" in validator_data:
            config.validator.timeout = _as_float(validator_data.get("timeout"))

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else root / path


def _as_str_map(value: Any) -> Dict[str, str]:
    # YAML reads unquoted versions such as 0.1 as floats.
    if not isinstance(value, dict):
        return {}
    return {
        str(key): str(item)
        for key, item in value.items()
        if isinstance(item, (str, int, float)) and not isinstance(item, bool)
    }


def _as_enum(enum_type: Any, value: Any, default: Any) -> Any:
    if value is None:
        return default
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigError(f"Unsupported value '{value}' (expected one of: {allowed})") from exc


__all__ = ["AmpScriptConfig", "ConfigError", "ValidatorConfig", "load_config", "CONFIG_FILENAME"]
