"""
Engine settings loaded from config.yaml
"""
import logging
import os
from dataclasses import dataclass, field

import yaml

from autofill.errors import ConfigError
from autofill.text_matcher import FUZZY_MATCH_THRESHOLD

logger = logging.getLogger(__name__)

MAX_CHAIN_DEPTH = 10

NEXT_TERMS = [
    "next", "continue", "dalej", "następny", "далее", "следующий", "далі",
    "weiter", "suivant", "siguiente", "avanti", "próximo",
]
SUBMIT_TERMS = [
    "submit", "send", "wyślij", "prześlij", "отправить", "надіслати",
    "absenden", "senden", "envoyer", "enviar", "invia",
]


@dataclass
class EngineConfig:
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD
    max_chain_depth: int = MAX_CHAIN_DEPTH
    chain_settle_delay: float = 1.0
    advance_delay: float = 1.0
    auto_advance: bool = True
    render_wait_attempts: int = 5
    render_wait_delay: float = 0.5
    pattern_cache_size: int = 256
    date_click_pause: float = 0.1
    date_input_pause: float = 0.15
    date_confirm_pause: float = 0.1
    next_terms: list = field(default_factory=lambda: list(NEXT_TERMS))
    submit_terms: list = field(default_factory=lambda: list(SUBMIT_TERMS))
    headless: bool = False
    viewport: dict = field(default_factory=lambda: {"width": 1280, "height": 800})
    timeout_ms: int = 30000

    @classmethod
    def from_dict(cls, data):
        """Build from the nested config.yaml layout; unknown keys are ignored."""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        def section(name):
            value = data.get(name) or {}
            if not isinstance(value, dict):
                raise ConfigError(f"Config section '{name}' must be a mapping")
            return value

        def terms(name, default):
            value = advance.get(name) or default
            if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
                raise ConfigError(f"advance.{name} must be a list of strings")
            return list(value)

        matching = section("matching")
        chain = section("chain")
        orch = section("orchestrator")
        date = section("date")
        advance = section("advance")
        browser = section("browser")
        defaults = cls()

        try:
            return cls(
                fuzzy_threshold=float(matching.get("fuzzy_threshold", defaults.fuzzy_threshold)),
                max_chain_depth=int(chain.get("max_depth", defaults.max_chain_depth)),
                chain_settle_delay=float(chain.get("settle_delay", defaults.chain_settle_delay)),
                advance_delay=float(orch.get("advance_delay", defaults.advance_delay)),
                auto_advance=bool(orch.get("auto_advance", defaults.auto_advance)),
                render_wait_attempts=int(orch.get("render_wait_attempts", defaults.render_wait_attempts)),
                render_wait_delay=float(orch.get("render_wait_delay", defaults.render_wait_delay)),
                pattern_cache_size=int(orch.get("pattern_cache_size", defaults.pattern_cache_size)),
                date_click_pause=float(date.get("click_pause", defaults.date_click_pause)),
                date_input_pause=float(date.get("input_pause", defaults.date_input_pause)),
                date_confirm_pause=float(date.get("confirm_pause", defaults.date_confirm_pause)),
                next_terms=terms("next_terms", defaults.next_terms),
                submit_terms=terms("submit_terms", defaults.submit_terms),
                headless=bool(browser.get("headless", defaults.headless)),
                viewport=dict(browser.get("viewport") or defaults.viewport),
                timeout_ms=int(browser.get("timeout_ms", defaults.timeout_ms)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}") from e

    @classmethod
    def no_delays(cls, **overrides):
        """Settings with every pause set to zero (tests, scripted runs)."""
        values = dict(
            chain_settle_delay=0,
            advance_delay=0,
            render_wait_delay=0,
            date_click_pause=0,
            date_input_pause=0,
            date_confirm_pause=0,
        )
        values.update(overrides)
        return cls(**values)


def load_config(config_path="config.yaml"):
    """Read config.yaml; a missing or unreadable file falls back to defaults."""
    if not os.path.exists(config_path):
        logger.info(f"No config at {config_path}, using defaults")
        return EngineConfig()
    try:
        with open(config_path, encoding="utf-8") as f:
            return EngineConfig.from_dict(yaml.safe_load(f) or {})
    except (OSError, yaml.YAMLError, ConfigError) as e:
        logger.warning(f"Failed to load config {config_path}: {e}")
        return EngineConfig()
