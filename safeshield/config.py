"""Configuration management for SafeShield."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .constants import parse_status
from .providers.hypernative_types import ALLOWED_RISK_TYPES, RISK_TYPE_MAP
from .similarity import SimilarityConfig

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """SafeShield configuration."""

    # Remote services
    gateway_url: str = "https://safe-client.safe.global"
    hypernative_api_url: str = "https://api.hypernative.xyz"
    hypernative_auth_token: str = ""
    request_timeout: float = 30.0

    # Orchestration
    hypernative_debounce_ms: int = 300

    # Paths
    config_dir: Path = field(default_factory=lambda: Path("./config"))

    # Heuristics (override via config/heuristics.yaml)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    risk_types: dict = field(default_factory=lambda: dict(RISK_TYPE_MAP))

    @property
    def hypernative_debounce_seconds(self) -> float:
        return self.hypernative_debounce_ms / 1000


def _load_heuristics(config_dir: Path) -> dict:
    """Load heuristic overrides from config/heuristics.yaml (optional)."""
    path = Path(config_dir or ".") / "heuristics.yaml"
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except Exception as exc:
        logger.warning("Failed to parse heuristics.yaml: %s", exc)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring heuristics.yaml: top level must be a mapping")
        return {}

    def _coerce_similarity(raw, default: SimilarityConfig) -> SimilarityConfig:
        if not isinstance(raw, dict):
            return default
        values = {}
        for key in ("prefix_length", "suffix_length", "hamming_threshold"):
            if key not in raw:
                continue
            try:
                value = int(raw[key])
            except (TypeError, ValueError):
                logger.warning("Ignoring similarity.%s: not an integer", key)
                continue
            if value < 0:
                logger.warning("Ignoring similarity.%s: must not be negative", key)
                continue
            values[key] = value
        return SimilarityConfig(
            prefix_length=values.get("prefix_length", default.prefix_length),
            suffix_length=values.get("suffix_length", default.suffix_length),
            hamming_threshold=values.get("hamming_threshold", default.hamming_threshold),
        )

    def _coerce_risk_types(raw) -> dict:
        items = {}
        for check_id, raw_type in (raw or {}).items():
            status = parse_status(raw_type)
            if status not in ALLOWED_RISK_TYPES:
                logger.warning("Ignoring hypernative risk type %s: unsupported type %r", check_id, raw_type)
                continue
            items[str(check_id).strip()] = status
        return items

    heuristics: dict = {}
    if "similarity" in data:
        heuristics["similarity"] = _coerce_similarity(data.get("similarity"), SimilarityConfig())

    hypernative = data.get("hypernative")
    if isinstance(hypernative, dict) and isinstance(hypernative.get("risk_types"), dict):
        heuristics["risk_types"] = _coerce_risk_types(hypernative["risk_types"])

    return heuristics


def load_config() -> Config:
    """Load configuration from environment variables."""
    load_dotenv()

    config_dir = Path(os.getenv("SAFESHIELD_CONFIG_DIR", "./config"))
    heuristics = _load_heuristics(config_dir)

    return Config(
        gateway_url=os.getenv("SAFESHIELD_GATEWAY_URL", "https://safe-client.safe.global"),
        hypernative_api_url=os.getenv("HYPERNATIVE_API_BASE_URL", "https://api.hypernative.xyz"),
        hypernative_auth_token=os.getenv("HYPERNATIVE_AUTH_TOKEN", ""),
        request_timeout=float(os.getenv("SAFESHIELD_REQUEST_TIMEOUT", "30")),
        hypernative_debounce_ms=int(os.getenv("HYPERNATIVE_DEBOUNCE_MS", "300")),
        config_dir=config_dir,
        similarity=heuristics.get("similarity", SimilarityConfig()),
        risk_types={**RISK_TYPE_MAP, **heuristics.get("risk_types", {})},
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []
    if not (config.gateway_url or "").startswith(("http://", "https://")):
        errors.append("SAFESHIELD_GATEWAY_URL must be an http(s) URL")
    if not (config.hypernative_api_url or "").startswith(("http://", "https://")):
        errors.append("HYPERNATIVE_API_BASE_URL must be an http(s) URL")
    if config.request_timeout <= 0:
        errors.append("SAFESHIELD_REQUEST_TIMEOUT must be positive")
    if config.hypernative_debounce_ms < 0:
        errors.append("HYPERNATIVE_DEBOUNCE_MS must not be negative")
    if config.similarity.prefix_length < 1 or config.similarity.suffix_length < 1:
        errors.append("similarity prefix_length and suffix_length must be at least 1")

    if not (config.hypernative_auth_token or "").strip():
        # Guard assessments report a missing token per request instead
        logger.info("No HYPERNATIVE_AUTH_TOKEN configured; Hypernative assessments will be unavailable")

    return errors
