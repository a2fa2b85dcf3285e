"""
Configuration loading for gitsketch.

Settings live in a YAML file (default: config/gitsketch.yaml) loaded with
OmegaConf. The file location can be overridden with the GITSKETCH_CONFIG
environment variable (a .env file is honored) or passed explicitly.

The loaded GitSketchConfig is immutable and is handed to every workflow step;
nothing reads configuration from module globals.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from gitsketch.exceptions import ConfigError

load_dotenv()

DEFAULT_CONFIG_PATH = Path("config/gitsketch.yaml")

# Keys that must be present (and non-null) in every configuration file
REQUIRED_KEYS = [
    "unpacked",
    "export.to",
    "export.tool",
    "export.type",
    "export.args.formats",
    "fonts.embed_prefixes",
    "fonts.ignore_prefixes",
]

# Export argument controlled by gitsketch itself (export.to)
RESERVED_EXPORT_ARG = "output"


@dataclass(frozen=True)
class ExportConfig:
    """
    sketchtool export settings.

    Attributes:
        tool: Absolute path where sketchtool is expected to live
        type: What to export (e.g., "artboards", "pages", "slices")
        to: Export directory name, relative to the sketch directory
        args: Extra --key=value options passed to sketchtool
    """

    tool: Path
    type: str
    to: str
    args: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FontConfig:
    """
    Font embedding settings for exported SVGs.

    Attributes:
        embed_prefixes: Font families starting with any of these are embedded
        ignore_prefixes: Font families starting with any of these are never embedded
        path: Directory containing the font files
        extension: Font file extension, without the dot
    """

    embed_prefixes: Tuple[str, ...]
    ignore_prefixes: Tuple[str, ...]
    path: Path
    extension: str = "ttf"


@dataclass(frozen=True)
class GitSketchConfig:
    """Complete, resolved gitsketch configuration."""

    repo_root: Path
    unpacked: str
    export: ExportConfig
    fonts: FontConfig
    delete_previews: bool = True
    generate_readme: bool = True
    source_path: Optional[Path] = None


def default_config_path() -> Path:
    """Config file from GITSKETCH_CONFIG, falling back to config/gitsketch.yaml."""
    env_path = os.getenv("GITSKETCH_CONFIG")
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def _resolve(path_value: str, base: Path) -> Path:
    path = Path(path_value).expanduser()
    return path if path.is_absolute() else (base / path).resolve()


def load_config(config_path: Optional[Path] = None) -> GitSketchConfig:
    """
    Load and validate gitsketch configuration.

    Args:
        config_path: YAML config file (defaults to default_config_path())

    Returns:
        Immutable GitSketchConfig

    Raises:
        ConfigError: If the file cannot be loaded or lacks a required key
    """
    if config_path is None:
        config_path = default_config_path()
    config_path = Path(config_path).resolve()

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        conf = OmegaConf.load(config_path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(conf, DictConfig):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")

    try:
        missing = [key for key in REQUIRED_KEYS if OmegaConf.select(conf, key) is None]
        data = OmegaConf.to_container(conf, resolve=True)
    except OmegaConfBaseException as e:
        raise ConfigError(f"Cannot resolve configuration in {config_path}: {e}") from e

    if missing:
        raise ConfigError(
            f"Missing required configuration keys in {config_path}: {', '.join(missing)}"
        )

    export_data = data["export"]
    font_data = data["fonts"]

    repo_root = Path(data.get("repo_root") or ".").expanduser().resolve()

    export = ExportConfig(
        tool=Path(export_data["tool"]).expanduser(),
        type=str(export_data["type"]),
        to=str(export_data["to"]),
        args={str(key): str(value) for key, value in export_data["args"].items()},
    )

    fonts = FontConfig(
        embed_prefixes=tuple(str(prefix) for prefix in font_data["embed_prefixes"]),
        ignore_prefixes=tuple(str(prefix) for prefix in font_data["ignore_prefixes"]),
        path=_resolve(font_data.get("path") or "./assets/fonts", repo_root),
        extension=str(font_data.get("extension") or "ttf").lstrip("."),
    )

    return GitSketchConfig(
        repo_root=repo_root,
        unpacked=str(data["unpacked"]),
        export=export,
        fonts=fonts,
        delete_previews=bool(data.get("delete_previews", True)),
        generate_readme=bool(data.get("generate_readme", True)),
        source_path=config_path,
    )
