"""
Configuration management (SSOT).

This module defines ALL configuration for the paystub extractor.
All config keys are defined here; no other module should invent config keys.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class OCRConfig:
    """Tesseract settings."""

    language: str = "eng"
    # Tesseract --psm (6 = assume a single uniform block of text)
    page_segmentation_mode: int = 6
    # Resolution for rendering scanned PDF pages
    dpi: int = 300
    # Path to the tesseract binary (None = look it up on PATH)
    tesseract_cmd: Optional[str] = None


@dataclass
class CacheConfig:
    """Result cache settings."""

    max_entries: int = 100
    ttl_seconds: int = 900
    sweep_interval_seconds: int = 300
    # Records must score strictly above this to be cached
    min_confidence: float = 0.7


@dataclass
class ExtractionConfig:
    """Application configuration (SSOT)."""

    # Master switch for optical recognition (images and scanned PDFs)
    enable_ocr: bool = True
    cache_enabled: bool = True
    # Intake limit, enforced before bytes reach the pipeline
    max_file_size_bytes: int = 10 * 1024 * 1024
    # Default per-extraction deadline
    processing_timeout_seconds: float = 30.0
    # Below this, a PDF text layer is treated as a scan
    min_text_length: int = 100

    ocr: OCRConfig = field(default_factory=OCRConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    # Confidence thresholds
    auto_threshold: float = 0.85
    review_threshold: float = 0.60

    def validate(self) -> list[str]:
        """Validate configuration consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.max_file_size_bytes <= 0:
            errors.append("max_file_size_bytes must be positive")
        if self.processing_timeout_seconds <= 0:
            errors.append("processing_timeout_seconds must be positive")
        if self.min_text_length < 0:
            errors.append("min_text_length must not be negative")

        if self.enable_ocr:
            if not self.ocr.language:
                errors.append("ocr.language is required when OCR is enabled")
            if self.ocr.dpi <= 0:
                errors.append("ocr.dpi must be positive")

        if self.cache.max_entries <= 0:
            errors.append("cache.max_entries must be positive")
        if self.cache.ttl_seconds <= 0:
            errors.append("cache.ttl_seconds must be positive")
        if self.cache.sweep_interval_seconds <= 0:
            errors.append("cache.sweep_interval_seconds must be positive")
        if not 0.0 <= self.cache.min_confidence <= 1.0:
            errors.append("cache.min_confidence must be between 0 and 1")

        if self.auto_threshold < self.review_threshold:
            errors.append("auto_threshold must be >= review_threshold")

        return errors


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def _env_number(name: str, default, cast):
    value = os.environ.get(name, "")
    if not value:
        return default
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigValidationError(f"{name} must be a number, got {value!r}") from e


def load_config(config_path: Optional[Path] = None) -> ExtractionConfig:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables can
    override config values:
    - PAYSTUB_ENABLE_OCR (true/false)
    - PAYSTUB_CACHE_ENABLED (true/false)
    - PAYSTUB_MAX_FILE_SIZE (bytes)
    - PAYSTUB_PROCESSING_TIMEOUT (seconds)
    - PAYSTUB_OCR_LANG
    - TESSERACT_CMD

    Raises:
        ConfigValidationError: If the resulting configuration is invalid
    """
    if config_path is not None and config_path.exists():
        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"{config_path}: invalid YAML: {e}") from e
    else:
        data = {}

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path}: top level must be a mapping")

    ocr_data = data.get("ocr") or {}
    ocr = OCRConfig(
        language=os.environ.get("PAYSTUB_OCR_LANG", ocr_data.get("language", "eng")),
        page_segmentation_mode=ocr_data.get("page_segmentation_mode", 6),
        dpi=ocr_data.get("dpi", 300),
        tesseract_cmd=os.environ.get("TESSERACT_CMD", ocr_data.get("tesseract_cmd")),
    )

    cache_data = data.get("cache") or {}
    cache = CacheConfig(
        max_entries=cache_data.get("max_entries", 100),
        ttl_seconds=cache_data.get("ttl_seconds", 900),
        sweep_interval_seconds=cache_data.get("sweep_interval_seconds", 300),
        min_confidence=cache_data.get("min_confidence", 0.7),
    )

    config = ExtractionConfig(
        enable_ocr=_env_bool("PAYSTUB_ENABLE_OCR", data.get("enable_ocr", True)),
        cache_enabled=_env_bool("PAYSTUB_CACHE_ENABLED", data.get("cache_enabled", True)),
        max_file_size_bytes=_env_number(
            "PAYSTUB_MAX_FILE_SIZE", data.get("max_file_size_bytes", 10 * 1024 * 1024), int
        ),
        processing_timeout_seconds=_env_number(
            "PAYSTUB_PROCESSING_TIMEOUT", data.get("processing_timeout_seconds", 30.0), float
        ),
        min_text_length=data.get("min_text_length", 100),
        ocr=ocr,
        cache=cache,
        auto_threshold=data.get("auto_threshold", 0.85),
        review_threshold=data.get("review_threshold", 0.60),
    )

    errors = config.validate()
    if errors:
        raise ConfigValidationError("Invalid configuration: " + "; ".join(errors))

    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Paystub Extractor Configuration
#
# Environment variables override these values:
#   PAYSTUB_ENABLE_OCR, PAYSTUB_CACHE_ENABLED, PAYSTUB_MAX_FILE_SIZE,
#   PAYSTUB_PROCESSING_TIMEOUT, PAYSTUB_OCR_LANG, TESSERACT_CMD

enable_ocr: true                  # Images and scanned PDFs need Tesseract
cache_enabled: true
max_file_size_bytes: 10485760     # 10 MB intake limit
processing_timeout_seconds: 30    # Per-document deadline (OCR only)
min_text_length: 100              # Shorter PDF text layers fall back to OCR

ocr:
  language: "eng"
  page_segmentation_mode: 6       # Single uniform block of text
  dpi: 300                        # Render resolution for scanned PDFs
  tesseract_cmd: null             # Path to tesseract (null = use PATH)

cache:
  max_entries: 100
  ttl_seconds: 900                # 15 minutes
  sweep_interval_seconds: 300     # Purge expired entries every 5 minutes
  min_confidence: 0.7             # Only cache records scoring above this

# Confidence thresholds
auto_threshold: 0.85    # Above this: accept without review
review_threshold: 0.60  # Above this: review, below: manual
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
