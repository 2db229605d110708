"""Application configuration loaded from TOML or YAML files."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

_FORMATS = {".toml": "toml", ".yaml": "yaml", ".yml": "yaml"}


class ConfigError(Exception):
    """Raised when a configuration cannot be found, parsed or validated."""


def _get(data: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ConfigError(f"missing field `{key}` in {where}") from None


def _table(data: Mapping[str, Any], key: str, where: str) -> Mapping[str, Any]:
    value = _get(data, key, where)
    if not isinstance(value, Mapping):
        raise ConfigError(f"field `{key}` in {where} must be a table")
    return value


def _as_float(value: Any, key: str, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"field `{key}` in {where} must be a number")
    return float(value)


def _float(data: Mapping[str, Any], key: str, where: str) -> float:
    return _as_float(_get(data, key, where), key, where)


def _as_uint(value: Any, key: str, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"field `{key}` in {where} must be a non-negative integer")
    return value


def _uint(data: Mapping[str, Any], key: str, where: str) -> int:
    return _as_uint(_get(data, key, where), key, where)


def _bool(data: Mapping[str, Any], key: str, where: str) -> bool:
    value = _get(data, key, where)
    if not isinstance(value, bool):
        raise ConfigError(f"field `{key}` in {where} must be a boolean")
    return value


def _str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = _get(data, key, where)
    if not isinstance(value, str):
        raise ConfigError(f"field `{key}` in {where} must be a string")
    return value


def _list(data: Mapping[str, Any], key: str, where: str) -> list[Any]:
    value = _get(data, key, where)
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"field `{key}` in {where} must be a list")
    return list(value)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float
    alt: float

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> Coordinates:
        where = "target.coordinates"
        return cls(
            lat=_float(data, "lat", where),
            lon=_float(data, "lon", where),
            alt=_float(data, "alt", where),
        )


@dataclass(frozen=True)
class TargetConfig:
    type: str
    embedding: tuple[float, ...]
    threshold: float
    coordinates: Coordinates | None = None

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> TargetConfig:
        where = "target"
        raw_coords = data.get("coordinates")
        if raw_coords is not None and not isinstance(raw_coords, Mapping):
            raise ConfigError("field `coordinates` in target must be a table")
        return cls(
            type=_str(data, "type", where),
            embedding=tuple(
                _as_float(v, "embedding", where) for v in _list(data, "embedding", where)
            ),
            threshold=_float(data, "threshold", where),
            coordinates=Coordinates._parse(raw_coords) if raw_coords is not None else None,
        )


@dataclass(frozen=True)
class AvoidanceConfig:
    person_safe_distance: float
    safe_distance: float
    max_yaw_rate: float
    repulse_gain: float

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> AvoidanceConfig:
        where = "avoidance"
        return cls(
            person_safe_distance=_float(data, "person_safe_distance", where),
            safe_distance=_float(data, "safe_distance", where),
            max_yaw_rate=_float(data, "max_yaw_rate", where),
            repulse_gain=_float(data, "repulse_gain", where),
        )


@dataclass(frozen=True)
class ControllerConfig:
    p_gain_advance: float
    p_gain_yaw: float

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> ControllerConfig:
        where = "controller"
        return cls(
            p_gain_advance=_float(data, "p_gain_advance", where),
            p_gain_yaw=_float(data, "p_gain_yaw", where),
        )


@dataclass(frozen=True)
class VisionConfig:
    video_src: str
    resolution: tuple[int, int]
    frame_rate: int

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> VisionConfig:
        where = "vision"
        resolution = _list(data, "resolution", where)
        if len(resolution) != 2:
            raise ConfigError("field `resolution` in vision must hold exactly 2 values")
        width, height = (_as_uint(v, "resolution", where) for v in resolution)
        return cls(
            video_src=_str(data, "video_src", where),
            resolution=(width, height),
            frame_rate=_uint(data, "frame_rate", where),
        )


@dataclass(frozen=True)
class CommConfig:
    mavlink_url: str
    heartbeat_rate: float

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> CommConfig:
        where = "communication"
        return cls(
            mavlink_url=_str(data, "mavlink_url", where),
            heartbeat_rate=_float(data, "heartbeat_rate", where),
        )


@dataclass(frozen=True)
class SimConfig:
    use_sim_time: bool
    timeout_connect: int

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> SimConfig:
        where = "simulation"
        return cls(
            use_sim_time=_bool(data, "use_sim_time", where),
            timeout_connect=_uint(data, "timeout_connect", where),
        )


@dataclass(frozen=True)
class OffboardConfig:
    failsafe_on_loss: bool
    command_freq: float

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> OffboardConfig:
        where = "offboard"
        return cls(
            failsafe_on_loss=_bool(data, "failsafe_on_loss", where),
            command_freq=_float(data, "command_freq", where),
        )


def _resolve(path: str | Path) -> tuple[Path, str]:
    """Find the file for a name, trying known extensions when needed."""
    candidate = Path(path)
    if candidate.is_file():
        fmt = _FORMATS.get(candidate.suffix.lower())
        if fmt is None:
            raise ConfigError(f'unsupported configuration format for "{path}"')
        return candidate, fmt
    for suffix, fmt in _FORMATS.items():
        with_ext = candidate.with_name(candidate.name + suffix)
        if with_ext.is_file():
            return with_ext, fmt
    raise ConfigError(f'configuration file "{path}" not found')


@dataclass(frozen=True)
class AppConfig:
    target: TargetConfig
    avoidance: AvoidanceConfig
    controller: ControllerConfig
    vision: VisionConfig
    communication: CommConfig
    simulation: SimConfig
    offboard: OffboardConfig

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AppConfig:
        """Build and validate a configuration from nested mappings."""
        if not isinstance(data, Mapping):
            raise ConfigError("configuration root must be a table")
        where = "configuration"
        return cls(
            target=TargetConfig._parse(_table(data, "target", where)),
            avoidance=AvoidanceConfig._parse(_table(data, "avoidance", where)),
            controller=ControllerConfig._parse(_table(data, "controller", where)),
            vision=VisionConfig._parse(_table(data, "vision", where)),
            communication=CommConfig._parse(_table(data, "communication", where)),
            simulation=SimConfig._parse(_table(data, "simulation", where)),
            offboard=OffboardConfig._parse(_table(data, "offboard", where)),
        )

    @classmethod
    def load_from_file(cls, path: str | Path) -> AppConfig:
        """Load a TOML or YAML file; the extension may be left off."""
        file, fmt = _resolve(path)
        try:
            text = file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f'cannot read "{file}": {exc}') from exc
        try:
            data = tomllib.loads(text) if fmt == "toml" else yaml.safe_load(text)
        except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f'cannot parse "{file}": {exc}') from exc
        return cls.from_mapping(data if data is not None else {})