# pyweave/config.py
from __future__ import annotations
import copy
import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import yaml

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "max_depth": 256,
    "strict_traits": False,
    "log_level": "WARNING",
    "display": {
        "density": 1.0,
        "scaled_density": 1.0,
        "xdpi": 160.0,
    },
}


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """
    Singleton config loader that supports:
      - an embedded config module (default name: _pyweave_config, attribute: CONFIG)
      - a fallback YAML file (pyweave.yaml)

    Loaded values are layered over DEFAULTS, so every known key is present.

    Usage:
        cfg = Config()  # prefers embedded if available, else loads pyweave.yaml
        depth = cfg.get("max_depth")
        density = cfg.get_nested("display.density", 1.0)
        cfg.reload()    # re-read embedded/file (useful in dev)

        detached = Config.from_mapping({"strict_traits": True})  # not the singleton

    Parameters:
      config_file: path to YAML config (relative or absolute).
      prefer_embedded: when True (default) try embedded module first, otherwise check file first.
      embedded_module_name: module name to import when looking for embedded config.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: str = "pyweave.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_pyweave_config",
    ):
        # initialize only once
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = copy.deepcopy(DEFAULTS)
        self._source: Optional[str] = None  # 'embedded', 'file', 'mapping' or None

        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "Config":
        """Builds a detached Config (not the shared instance) from a dict."""
        cfg = object.__new__(cls)
        cfg._initialized = True
        cfg.config_file_arg = None
        cfg.prefer_embedded = False
        cfg.embedded_module_name = None
        cfg._resolved_config_path = None
        cfg._config = _merge(DEFAULTS, data or {})
        cfg._source = "mapping"
        return cfg

    @classmethod
    def from_file(cls, path) -> "Config":
        """Builds a detached Config from a YAML file; missing keys take defaults."""
        with Path(path).open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
        cfg = cls.from_mapping(data)
        cfg._resolved_config_path = Path(path).resolve()
        cfg._source = "file"
        return cfg

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None) -> None:
        """
        Reload the configuration. If prefer_embedded is provided, it overrides the instance preference
        just for this reload.
        """
        if self._source == "mapping":
            return
        prefer = self.prefer_embedded if prefer_embedded is None else bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = copy.deepcopy(DEFAULTS)

    def as_dict(self) -> Dict[str, Any]:
        """Return the loaded configuration as a dict."""
        return copy.deepcopy(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        return self._config.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "display.density").
        Returns default if any step is missing.
        """
        cur = self._config
        if not path:
            return default
        for part in path.split(sep):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur

    @property
    def max_depth(self) -> int:
        return int(self.get("max_depth", DEFAULTS["max_depth"]))

    @property
    def strict_traits(self) -> bool:
        return bool(self.get("strict_traits", False))

    @property
    def display(self) -> Dict[str, float]:
        """Display metrics used for contexts that do not report their own."""
        display = self.get("display") or {}
        return {key: float(display.get(key, default)) for key, default in DEFAULTS["display"].items()}

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|'mapping'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        return self._resolved_config_path

    def apply_logging(self) -> None:
        """Sets the pyweave logger level from ``log_level``."""
        level = str(self.get("log_level", "WARNING")).upper()
        logging.getLogger("pyweave").setLevel(getattr(logging, level, logging.WARNING))

    # ----- internal helpers -----
    def _resolve_config_path(self, config_file: str) -> Optional[Path]:
        """
        Try to resolve the YAML config path:
          1. config_file is absolute and exists
          2. config_file relative to the package's parent (project root)
          3. config_file relative to cwd
        """
        candidate = Path(config_file)
        if candidate.is_absolute():
            return candidate.resolve() if candidate.exists() else None

        project_root = Path(__file__).resolve().parent.parent
        for base in (project_root, Path.cwd()):
            path = (base / config_file).resolve()
            if path.exists():
                return path
        return None

    def _try_load_embedded(self) -> bool:
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False
        cfg = getattr(module, "CONFIG", None)
        if not isinstance(cfg, Mapping):
            logger.warning("Embedded config %s has no CONFIG mapping; ignoring it", self.embedded_module_name)
            return False
        self._config = _merge(DEFAULTS, cfg)
        self._source = "embedded"
        logger.debug("Loaded embedded config from %s", self.embedded_module_name)
        return True

    def _try_load_file(self) -> bool:
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Could not read config %s: %s", self._resolved_config_path, exc)
            return False
        if not isinstance(data, Mapping):
            logger.warning("Config %s is not a mapping; ignoring it", self._resolved_config_path)
            return False
        self._config = _merge(DEFAULTS, data)
        self._source = "file"
        logger.debug("Loaded config file %s", self._resolved_config_path)
        return True

    def debug_print(self) -> None:
        print(f"[Config] source={self._source}; config_file_arg={self.config_file_arg}")
        if self._resolved_config_path:
            print(f"[Config] resolved_config_path={self._resolved_config_path}")
        print(f"[Config] keys={list(self._config.keys())}")


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)
