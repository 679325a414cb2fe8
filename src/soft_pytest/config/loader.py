"""Discovery and parsing of soft assertion YAML settings."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import yaml
from pydantic import ValidationError

from soft_pytest.config.models import SoftAssertConfig
from soft_pytest.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# settings may be nested under this key, e.g. in a shared tooling file
SECTION_KEY = "soft_assertions"


class ConfigLoader:
    """
    Find and read soft assertion settings.

    Files are looked up from a start directory upwards. The search stops at
    the first directory that marks a project root, so settings never leak
    in from outside the project under test.
    """

    DEFAULT_CONFIG_NAMES = [
        "soft_assertions.yaml",
        "soft_assertions.yml",
        ".soft_assertions.yaml",
        ".soft_assertions.yml",
    ]

    PROJECT_MARKERS = ["pyproject.toml", "setup.cfg", "pytest.ini", "tox.ini", ".git"]

    @classmethod
    def load(
        cls,
        config_path: Optional[str | Path] = None,
        root_dir: Optional[Path] = None,
    ) -> SoftAssertConfig:
        """
        Load settings for a test run.

        Args:
            config_path: File named by the user. Relative paths are taken
                from root_dir. If None, the directory tree is searched.
            root_dir: Directory the search starts from. Defaults to the
                current directory.

        Returns:
            SoftAssertConfig built from the file, or the defaults.

        Raises:
            FileNotFoundError: If config_path is given but does not exist.
            ConfigurationError: If the file does not hold valid settings.
        """
        base = root_dir if root_dir is not None else Path.cwd()

        if config_path is None:
            path = cls.find_config_file(base)
            if path is None:
                logger.debug(f"No soft assertion settings found from {base}, using defaults")
                return SoftAssertConfig()
        else:
            path = Path(config_path)
            if not path.is_absolute():
                path = base / path
            if not path.is_file():
                raise FileNotFoundError(f"Configuration file not found: {path}")

        return cls.parse(path)

    @classmethod
    def find_config_file(cls, start_dir: Path) -> Optional[Path]:
        """
        First settings file found from start_dir up to the project root.

        Within one directory, DEFAULT_CONFIG_NAMES order decides.
        """
        for directory in cls.search_dirs(start_dir):
            for name in cls.DEFAULT_CONFIG_NAMES:
                candidate = directory / name
                if candidate.is_file():
                    logger.debug(f"Using soft assertion settings from {candidate}")
                    return candidate
        return None

    @classmethod
    def search_dirs(cls, start_dir: Path) -> Iterator[Path]:
        """Yield start_dir and its parents, ending at the project root."""
        directory = start_dir.resolve()
        while True:
            yield directory
            if cls.is_project_root(directory) or directory.parent == directory:
                return
            directory = directory.parent

    @classmethod
    def is_project_root(cls, directory: Path) -> bool:
        return any((directory / marker).exists() for marker in cls.PROJECT_MARKERS)

    @classmethod
    def parse(cls, path: Path) -> SoftAssertConfig:
        """
        Validate the settings held by one YAML file.

        Raises:
            ConfigurationError: On YAML syntax errors, a document that is not
                a mapping, or values rejected by SoftAssertConfig.
        """
        logger.info(f"Loading soft assertion configuration from: {path}")
        settings = _settings_section(_read_yaml(path), path)

        try:
            return SoftAssertConfig.model_validate(settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid soft assertion configuration in {path}:\n{e}") from e

    @classmethod
    def merge_configs(cls, base: SoftAssertConfig, override: SoftAssertConfig) -> SoftAssertConfig:
        """Settings of base, replaced by the fields explicitly set on override."""
        merged = base.model_dump()
        merged.update(override.model_dump(exclude_unset=True))
        return SoftAssertConfig.model_validate(merged)


def _read_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid soft assertion configuration in {path}: {e}") from e


def _settings_section(document: Any, path: Path) -> Dict[str, Any]:
    """Settings mapping of a parsed document; an empty file means defaults."""
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationError(
            f"Invalid soft assertion configuration in {path}: "
            f"expected a mapping, got {type(document).__name__}"
        )
    section = document.get(SECTION_KEY)
    if isinstance(section, dict):
        return section
    return document
