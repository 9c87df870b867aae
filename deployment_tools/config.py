import os
from pathlib import Path
from typing import NamedTuple, Optional

import yaml

from deployment_tools.errors import ConfigError

CONFIG_FILE = "deployments.yaml"

DEFAULTS = {
    "assets_dir": "src/assets",
    "version_prefix": "v",
    "record_suffix": ".json",
}


class RegistryConfig(NamedTuple):
    assets_dir: Path
    version_prefix: str
    record_suffix: str

    def version_dir(self, version: str) -> Path:
        return self.assets_dir / f"{self.version_prefix}{version}"


def load_config(path: Optional[str] = None) -> RegistryConfig:
    """
    Load registry layout settings from a YAML file, falling back to DEFAULTS.
    The file is taken from `path`, then $DEPLOYMENTS_CONFIG, then ./deployments.yaml;
    a missing file is not an error. $DEPLOYMENTS_ASSETS_DIR overrides assets_dir.
    """
    config_path = Path(path or os.environ.get("DEPLOYMENTS_CONFIG", CONFIG_FILE))
    settings = dict(DEFAULTS)

    if config_path.exists():
        with open(config_path) as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {config_path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_path} must contain a mapping of settings")
        unknown = sorted(set(loaded) - set(DEFAULTS))
        if unknown:
            raise ConfigError(f"Unknown settings in {config_path}: {', '.join(map(str, unknown))}")
        settings.update({key: str(value) for key, value in loaded.items()})
    elif path:
        raise ConfigError(f"Config file does not exist: {config_path}")

    settings["assets_dir"] = os.environ.get("DEPLOYMENTS_ASSETS_DIR", settings["assets_dir"])

    return RegistryConfig(
        assets_dir=Path.cwd() / settings["assets_dir"],
        version_prefix=settings["version_prefix"],
        record_suffix=settings["record_suffix"],
    )
