"""Configuration of published downloads: base URL, platforms and binary kinds."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from src.exceptions import ConfigError
from src.models import Version
from src.utils import (
    CHROME_HEADLESS_SHELL,
    CHROME_HEADLESS_SHELL_AVAILABLE_SINCE,
    CHROMEDRIVER,
    CHROMEDRIVER_AVAILABLE_SINCE,
)

DEFAULT_BASE_URL = "https://storage.googleapis.com/chrome-for-testing-public"

DEFAULT_PLATFORMS = ["linux64", "mac-arm64", "mac-x64", "win32", "win64"]


@dataclass
class BinarySpec:
    """Configuration for a binary kind.

    Attributes:
        name: Binary kind, also used in artifact file names (e.g., "chromedriver")
        platform_agnostic: Whether a single archive serves every platform
        hidden: Whether the binary is left out of published download manifests
        available_since: First version that shipped this binary, or None
    """

    name: str
    platform_agnostic: bool = False
    hidden: bool = False
    available_since: str | None = None


def default_binaries() -> list[BinarySpec]:
    return [
        BinarySpec(name="chrome"),
        BinarySpec(name=CHROMEDRIVER, available_since=CHROMEDRIVER_AVAILABLE_SINCE),
        BinarySpec(
            name=CHROME_HEADLESS_SHELL,
            available_since=CHROME_HEADLESS_SHELL_AVAILABLE_SINCE,
        ),
        # Excluded from the dashboard and the API.
        BinarySpec(name="mojojs", platform_agnostic=True, hidden=True),
    ]


@dataclass
class DownloadsConfig:
    """Configuration for download manifest expansion.

    Attributes:
        base_url: Base URL artifacts are served from
        platforms: Supported platforms, in publishing order
        binaries: Binary kinds, in publishing order
    """

    base_url: str = DEFAULT_BASE_URL
    platforms: list[str] = field(default_factory=lambda: list(DEFAULT_PLATFORMS))
    binaries: list[BinarySpec] = field(default_factory=default_binaries)

    @property
    def available_since(self) -> dict[str, str]:
        """Mapping of binary kind to its first shipping version."""
        return {
            binary.name: binary.available_since
            for binary in self.binaries
            if binary.available_since is not None
        }

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "DownloadsConfig":
        """Load configuration from a YAML file.

        Keys left out of the file keep their defaults.

        Args:
            yaml_path: Path to the YAML configuration file

        Returns:
            DownloadsConfig populated from the YAML file

        Raises:
            FileNotFoundError: If the YAML file does not exist
            KeyError: If a binary entry has no name
            ConfigError: If the file does not hold a mapping
            MalformedVersionError: If an available_since value is not a version
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"{yaml_path} must contain a mapping")

        config = cls()
        if "base_url" in data:
            config.base_url = str(data["base_url"]).rstrip("/")
        if "platforms" in data:
            config.platforms = [str(platform) for platform in data["platforms"]]
        if "binaries" in data:
            binaries = []
            for entry in data["binaries"]:
                available_since = entry.get("available_since")
                if available_since is not None:
                    available_since = str(Version.parse(str(available_since)))
                binaries.append(
                    BinarySpec(
                        name=entry["name"],
                        platform_agnostic=bool(entry.get("platform_agnostic", False)),
                        hidden=bool(entry.get("hidden", False)),
                        available_since=available_since,
                    )
                )
            config.binaries = binaries

        return config


class ConfigManager:
    """Locates and loads the downloads configuration.

    Attributes:
        config_path: Path to the YAML config, or None to use the defaults
    """

    def __init__(self, config_path: str | None = None) -> None:
        self.config_path = Path(config_path) if config_path else None

    def load(self) -> DownloadsConfig:
        """Load the downloads configuration.

        Returns:
            DownloadsConfig from the YAML file, or the defaults if no path is set

        Raises:
            FileNotFoundError: If a path is set but the file does not exist
        """
        if self.config_path is None:
            return DownloadsConfig()
        return DownloadsConfig.from_yaml(self.config_path)
