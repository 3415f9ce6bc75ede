import os
import yaml
from curvecompress.core.domain.settings import EngineSettings

def load_settings(path: str | None = None) -> EngineSettings:
    """
    Load engine settings from a YAML file.
    Environment variables override file values; missing values use defaults.

    Args:
        path: Path to config.yaml. Defaults to CURVECOMPRESS_CONFIG_FILE env var or "config.yaml".
    """
    if path is None:
        path = os.getenv("CURVECOMPRESS_CONFIG_FILE", "config.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}")

    # Env vars > File > Defaults
    if os.getenv("CURVECOMPRESS_LOG_LEVEL"):
        config_data["log_level"] = os.getenv("CURVECOMPRESS_LOG_LEVEL")

    if os.getenv("CURVECOMPRESS_ESTIMATOR_WORKERS"):
        config_data["estimator_workers"] = int(os.getenv("CURVECOMPRESS_ESTIMATOR_WORKERS"))

    if os.getenv("CURVECOMPRESS_DEFAULT_TOLERANCE"):
        config_data["default_tolerance"] = float(os.getenv("CURVECOMPRESS_DEFAULT_TOLERANCE"))

    return EngineSettings(**config_data)
