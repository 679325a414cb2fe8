"""Configuration module for soft-pytest."""

from soft_pytest.config.models import SoftAssertConfig
from soft_pytest.config.loader import ConfigLoader

__all__ = ["SoftAssertConfig", "ConfigLoader"]
