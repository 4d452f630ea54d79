"""Run settings: defaults, then bbcards.yml, then environment, then CLI flags."""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from bbcards import BBCardsError
from bbcards.layout.geometry import CardGeometry, compute_geometry
from bbcards.render.document import BLACK_FILE, ICON_FILE, WHITE_FILE, RenderOptions
from bbcards.render.fonts import DEFAULT_FONT_DIR

logger = logging.getLogger(__name__)

CONFIG_FILE = "bbcards.yml"

# Card size presets in inches (width, height)
CARD_SIZES = {
    "small": (2.0, 2.0),
    "large": (2.5, 3.5),
}

ENV_VARS = {
    "BBCARDS_FONT_DIR": "font_dir",
    "BBCARDS_DEFAULT_ICON": "default_icon",
    "BBCARDS_OUTPUT_DIR": "output_dir",
}


class ConfigError(BBCardsError):
    """Invalid configuration."""
    pass


@dataclass
class Settings:
    """Everything that shapes a run except the decks themselves."""

    card_size: str = "small"
    card_width: Optional[float] = None
    card_height: Optional[float] = None
    rounded: bool = False
    one_per_page: bool = False
    font_dir: Optional[str] = DEFAULT_FONT_DIR
    default_icon: Optional[str] = None
    output_dir: str = "."
    white_file: str = WHITE_FILE
    black_file: str = BLACK_FILE
    icon_file: str = ICON_FILE

    def card_dimensions(self) -> tuple[float, float]:
        """Card (width, height) in inches; explicit sizes override the preset."""
        if self.card_size not in CARD_SIZES:
            raise ConfigError(
                f"Unknown card_size {self.card_size!r}; expected one of {', '.join(CARD_SIZES)}"
            )
        width, height = CARD_SIZES[self.card_size]
        width = self.card_width if self.card_width is not None else width
        height = self.card_height if self.card_height is not None else height
        if width <= 0 or height <= 0:
            raise ConfigError(f"Card size must be positive, got {width} x {height}")
        return width, height

    def geometry(self) -> CardGeometry:
        """Card geometry for these settings. An empty grid is a config error."""
        width, height = self.card_dimensions()
        geometry = compute_geometry(width, height, self.rounded, self.one_per_page)
        if geometry.capacity == 0:
            raise ConfigError(
                f'{width}" x {height}" cards do not fit on '
                f"{geometry.paper_width:.0f} x {geometry.paper_height:.0f} pt paper"
            )
        return geometry

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            geometry=self.geometry(),
            default_icon=Path(self.default_icon) if self.default_icon else None,
            output_dir=Path(self.output_dir),
            white_file=self.white_file,
            black_file=self.black_file,
            icon_file=self.icon_file,
        )


_FIELD_TYPES = {
    "card_size": str,
    "card_width": float,
    "card_height": float,
    "rounded": bool,
    "one_per_page": bool,
    "font_dir": str,
    "default_icon": str,
    "output_dir": str,
    "white_file": str,
    "black_file": str,
    "icon_file": str,
}


def _coerce(key: str, value: Any) -> Any:
    expected = _FIELD_TYPES[key]
    if value is None:
        return None
    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("1", "true", "yes", "on", "0", "false", "no", "off"):
            return value.lower() in ("1", "true", "yes", "on")
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    if expected is float:
        if isinstance(value, bool):
            raise ConfigError(f"{key} must be a number, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be a number, got {value!r}")
    return str(value)


def apply_overrides(settings: Settings, overrides: dict[str, Any]) -> Settings:
    """Return settings with known keys replaced. Unknown keys are logged and skipped."""
    known = {f.name for f in fields(Settings)}
    changes = {}
    for key, value in overrides.items():
        key = str(key).replace("-", "_")
        if key in known:
            changes[key] = _coerce(key, value)
        else:
            logger.warning(f"Ignoring unknown setting: {key}")
    return replace(settings, **changes)


def load_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read a YAML settings mapping. A missing file is an empty mapping."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")
    return data


def env_overrides(environ: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Settings taken from BBCARDS_* environment variables."""
    environ = os.environ if environ is None else environ
    return {key: environ[var] for var, key in ENV_VARS.items() if environ.get(var)}


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[dict[str, Any]] = None,
    environ: Optional[dict[str, str]] = None,
) -> Settings:
    """Build settings from every layer.

    Args:
        config_path: YAML file (default: ./bbcards.yml if present)
        overrides: Values from the command line; None values are skipped
        environ: Environment mapping (default: os.environ after loading .env)
    """
    if environ is None:
        env_path = Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)

    if config_path is not None and not Path(config_path).exists():
        raise ConfigError(f"Config file not found: {config_path}")

    settings = Settings()
    settings = apply_overrides(settings, load_config_file(config_path or CONFIG_FILE))
    settings = apply_overrides(settings, env_overrides(environ))
    if overrides:
        settings = apply_overrides(settings, {k: v for k, v in overrides.items() if v is not None})

    logger.debug(f"Settings: {settings}")
    return settings
