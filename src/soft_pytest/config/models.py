"""Pydantic models for soft assertion configuration."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class SoftAssertConfig(BaseModel):
    """Root configuration model for soft assertions."""

    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_captures: bool = Field(True, description="Whether to log every captured failure")
    log_file: Optional[Path] = Field(None, description="Optional file receiving capture logs")
    use_colors: bool = Field(True, description="Whether to color console capture logs")
    auto_assert_all: bool = Field(
        True, description="Whether the softly fixture calls assert_all() after each test"
    )
    max_report_failures: int = Field(
        50, description="Maximum number of captured failures shown in a test report section"
    )
    max_logged_events: int = Field(
        1000, description="Maximum number of capture events kept in the logger's history"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("max_report_failures", "max_logged_events")
    @classmethod
    def validate_positive_limit(cls, v: int, info: ValidationInfo) -> int:
        """Validate limits are positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v
