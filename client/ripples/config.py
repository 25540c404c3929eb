"""Client configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: RIPPLES_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ServiceConfig:
    base_url: str = "http://localhost:8080/location"
    timeout_seconds: float = 10.0


@dataclass
class ReportingConfig:
    party_mode: bool = False
    joined_display_seconds: float = 3.0


@dataclass
class OscillatorConfig:
    lower_bound: float = 0.5
    upper_bound: float = 2.0
    step: float = 0.02
    tick_seconds: float = 0.025


@dataclass
class IdentityConfig:
    user_id: str = ""
    id_file: str = "data/install_id"


@dataclass
class LocationConfig:
    source: str = "push"  # "push" or "simulated"
    sim_center: str = "40.730610,-73.935242"
    sim_interval_seconds: float = 1.0


@dataclass
class ApiConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"


@dataclass
class AppConfig:
    service: ServiceConfig = field(default_factory=ServiceConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    oscillator: OscillatorConfig = field(default_factory=OscillatorConfig)
    identity: IdentityConfig = field(default_factory=IdentityConfig)
    location: LocationConfig = field(default_factory=LocationConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "RIPPLES_SERVICE_BASE_URL": lambda v: setattr(config.service, "base_url", v),
        "RIPPLES_SERVICE_TIMEOUT": lambda v: setattr(config.service, "timeout_seconds", float(v)),
        "RIPPLES_REPORTING_PARTY_MODE": lambda v: setattr(config.reporting, "party_mode", _parse_bool(v)),
        "RIPPLES_REPORTING_JOINED_DISPLAY": lambda v: setattr(config.reporting, "joined_display_seconds", float(v)),
        "RIPPLES_OSCILLATOR_LOWER_BOUND": lambda v: setattr(config.oscillator, "lower_bound", float(v)),
        "RIPPLES_OSCILLATOR_UPPER_BOUND": lambda v: setattr(config.oscillator, "upper_bound", float(v)),
        "RIPPLES_OSCILLATOR_STEP": lambda v: setattr(config.oscillator, "step", float(v)),
        "RIPPLES_OSCILLATOR_TICK": lambda v: setattr(config.oscillator, "tick_seconds", float(v)),
        "RIPPLES_IDENTITY_USER_ID": lambda v: setattr(config.identity, "user_id", v),
        "RIPPLES_IDENTITY_ID_FILE": lambda v: setattr(config.identity, "id_file", v),
        "RIPPLES_LOCATION_SOURCE": lambda v: setattr(config.location, "source", v),
        "RIPPLES_LOCATION_SIM_CENTER": lambda v: setattr(config.location, "sim_center", v),
        "RIPPLES_LOCATION_SIM_INTERVAL": lambda v: setattr(config.location, "sim_interval_seconds", float(v)),
        "RIPPLES_API_HOST": lambda v: setattr(config.api, "host", v),
        "RIPPLES_API_PORT": lambda v: setattr(config.api, "port", int(v)),
        "RIPPLES_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "RIPPLES_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section_name in ("service", "reporting", "oscillator", "identity",
                             "location", "api", "logging"):
            section = getattr(config, section_name)
            for k, v in (raw.get(section_name) or {}).items():
                if hasattr(section, k):
                    setattr(section, k, v)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config


def parse_center(value: str) -> tuple[float, float]:
    """Parse a "lat,lon" string as used by the simulated location source."""
    lat, lon = value.split(",")
    return float(lat), float(lon)
