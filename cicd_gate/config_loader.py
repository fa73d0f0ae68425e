import hashlib
import os
from pathlib import Path

import yaml

from cicd_gate.github_client import DEFAULT_API_BASE
from cicd_gate.logger import log_event


class ConfigLoadError(Exception):
    pass


REQUIRED_KEYS = {
    "version",
    "api_base",
}

STRING_KEYS = ("api_base", "artifact_root", "status_context")

DEFAULTS = {
    "artifact_root": "artifacts/governance",
    "publish_status": False,
    "status_context": "ci/cicd-approval",
}

NO_CONFIG_HASH = "0" * 64


def default_config(env=None):
    env = os.environ if env is None else env
    config = dict(DEFAULTS)
    config["version"] = "default"
    config["api_base"] = env.get("GITHUB_API_URL") or DEFAULT_API_BASE
    return config, NO_CONFIG_HASH


def load_config(config_path):
    path = Path(config_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        log_event("config_loader", f"load_failed path={path} error={exc}")
        raise ConfigLoadError(f"Failed to read config: {exc}") from exc

    try:
        loaded = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        log_event("config_loader", f"parse_failed path={path} error={exc}")
        raise ConfigLoadError(f"Failed to parse config YAML: {exc}") from exc

    if not isinstance(loaded, dict):
        log_event("config_loader", f"invalid_mapping path={path}")
        raise ConfigLoadError("Config YAML must be a mapping")

    missing = sorted(REQUIRED_KEYS - set(loaded.keys()))
    if missing:
        log_event("config_loader", f"missing_keys path={path} missing={','.join(missing)}")
        raise ConfigLoadError(f"Config missing required keys: {', '.join(missing)}")

    if not isinstance(loaded.get("publish_status", False), bool):
        log_event("config_loader", f"invalid_value path={path} key=publish_status")
        raise ConfigLoadError("Config key publish_status must be a boolean")

    config = dict(DEFAULTS)
    config.update(loaded)

    for key in STRING_KEYS:
        value = config.get(key)
        if not isinstance(value, str) or not value.strip():
            log_event("config_loader", f"invalid_value path={path} key={key}")
            raise ConfigLoadError(f"Config key {key} must be a non-empty string")

    config_hash = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    log_event(
        "config_loader",
        f"loaded path={path} top_keys={','.join(sorted(loaded.keys()))} config_hash={config_hash}",
    )
    return config, config_hash


def resolve_config(config_path=None, env=None):
    env = os.environ if env is None else env
    effective_path = config_path or env.get("CICD_GATE_CONFIG_PATH")
    if not effective_path:
        return default_config(env)
    return load_config(effective_path)
