# ============================================================================
# attachment_extractor/config_manager.py
# ============================================================================
"""
Configuration management for the attachment extractor.
Supports environment variable configuration for Azure Functions deployment.
"""

import os
from dataclasses import dataclass, field

from .exceptions import ConfigurationError

MB = 1024 * 1024

# Upper bound for max_nested_depth; the walker recurses once per level.
MAX_SUPPORTED_DEPTH = 200


@dataclass(frozen=True)
class SecurityConfiguration:
    """Limits that keep extraction bounded on hostile input."""
    max_nested_depth: int = 20
    max_message_size_mb: int = 50
    max_attachment_size_mb: int = 25
    max_attachments: int = 100

    @property
    def max_message_size_bytes(self) -> int:
        return self.max_message_size_mb * MB

    @property
    def max_attachment_size_bytes(self) -> int:
        return self.max_attachment_size_mb * MB


@dataclass(frozen=True)
class ProcessingConfiguration:
    """Extraction behaviour switches."""
    validate_pdf_structure: bool = True
    deep_pdf_check: bool = True
    sniff_content_types: bool = True
    enable_deduplication: bool = False
    default_filename: str = "attachment.bin"
    default_mime_type: str = "application/octet-stream"


@dataclass(frozen=True)
class LoggingConfiguration:
    """Logging configuration settings."""
    level: str = "INFO"
    log_attachments: bool = True
    max_log_message_length: int = 200


@dataclass(frozen=True)
class ExtractorConfiguration:
    """Complete extractor configuration combining all sub-configurations."""
    security: SecurityConfiguration = field(default_factory=SecurityConfiguration)
    processing: ProcessingConfiguration = field(default_factory=ProcessingConfiguration)
    logging: LoggingConfiguration = field(default_factory=LoggingConfiguration)

    def validate(self) -> None:
        """Validate configuration values and raise ConfigurationError for invalid settings."""
        errors = []

        if self.security.max_nested_depth <= 0:
            errors.append("max_nested_depth must be positive")
        if self.security.max_nested_depth > MAX_SUPPORTED_DEPTH:
            errors.append(f"max_nested_depth cannot exceed {MAX_SUPPORTED_DEPTH}")
        if self.security.max_message_size_mb <= 0:
            errors.append("max_message_size_mb must be positive")
        if self.security.max_attachment_size_mb <= 0:
            errors.append("max_attachment_size_mb must be positive")
        if self.security.max_attachments <= 0:
            errors.append("max_attachments must be positive")

        if not self.processing.default_filename:
            errors.append("default_filename cannot be empty")
        if "/" not in self.processing.default_mime_type:
            errors.append("default_mime_type must be a type/subtype token")

        if self.logging.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"unknown log level {self.logging.level!r}")
        if self.logging.max_log_message_length <= 0:
            errors.append("max_log_message_length must be positive")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                {"errors": errors}
            )


def get_config_from_env() -> ExtractorConfiguration:
    """Load configuration from EXTRACTOR_* environment variables."""

    security_config = SecurityConfiguration(
        max_nested_depth=_get_int_env("EXTRACTOR_MAX_NESTED_DEPTH", 20),
        max_message_size_mb=_get_int_env("EXTRACTOR_MAX_MESSAGE_SIZE_MB", 50),
        max_attachment_size_mb=_get_int_env("EXTRACTOR_MAX_ATTACHMENT_SIZE_MB", 25),
        max_attachments=_get_int_env("EXTRACTOR_MAX_ATTACHMENTS", 100)
    )

    processing_config = ProcessingConfiguration(
        validate_pdf_structure=_get_bool_env("EXTRACTOR_VALIDATE_PDF", True),
        deep_pdf_check=_get_bool_env("EXTRACTOR_DEEP_PDF_CHECK", True),
        sniff_content_types=_get_bool_env("EXTRACTOR_SNIFF_CONTENT_TYPES", True),
        enable_deduplication=_get_bool_env("EXTRACTOR_DEDUPLICATION_ENABLED", False),
        default_filename=os.getenv("EXTRACTOR_DEFAULT_FILENAME", "attachment.bin"),
    )

    logging_config = LoggingConfiguration(
        level=os.getenv("EXTRACTOR_LOG_LEVEL", "INFO").upper(),
        log_attachments=_get_bool_env("EXTRACTOR_LOG_ATTACHMENTS", True),
        max_log_message_length=_get_int_env("EXTRACTOR_MAX_LOG_LENGTH", 200)
    )

    config = ExtractorConfiguration(
        security=security_config,
        processing=processing_config,
        logging=logging_config
    )

    config.validate()

    return config


def get_default_config() -> ExtractorConfiguration:
    """Get default configuration with factory defaults."""
    config = ExtractorConfiguration()
    config.validate()
    return config


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off"):
        return False
    else:
        return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_azure_config() -> ExtractorConfiguration:
    """Get configuration for the Azure Functions host: environment first, defaults on failure."""
    try:
        return get_config_from_env()
    except ConfigurationError:
        return get_default_config()
