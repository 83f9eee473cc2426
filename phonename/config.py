"""
Runtime settings for the lookup pipeline.

Defaults reproduce the production behaviour; a YAML file (see
``config/example.yaml``) and a few ``PNL_*`` environment variables can
override them.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .pipeline.gate import LOGIN_GATE_MARKERS
from .pipeline.validators import NameRule, PARTIAL_RULE, WEB_RULE


DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_LAUNCH_ARGS = [
    '--disable-dev-shm-usage',
    '--disable-gpu',
    '--disable-extensions',
    '--disable-plugins',
    '--no-first-run',
    '--disable-default-apps',
    '--disable-background-timer-throttling',
]


class ConfigError(Exception):
    """Settings file missing, unparsable or invalid."""


class PartialPattern(BaseModel):
    label: str
    pattern: str


class ProviderSettings(BaseModel):
    base_url: str = "https://www.truecaller.com/search"
    region_code: str = "ke"


class Viewport(BaseModel):
    width: int = 1920
    height: int = 1080


class BrowserSettings(BaseModel):
    user_agent: str = DEFAULT_UA
    viewport: Viewport = Field(default_factory=Viewport)
    headless: bool = True
    chromium_sandbox: bool = True
    launch_args: List[str] = Field(default_factory=lambda: list(DEFAULT_LAUNCH_ARGS))


class TimeoutSettings(BaseModel):
    navigation_ms: int = 30000
    settle_ms: int = 5000


class ExtractionSettings(BaseModel):
    gate_markers: List[str] = Field(default_factory=lambda: list(LOGIN_GATE_MARKERS))
    partial_patterns: List[PartialPattern] = Field(default_factory=lambda: [
        PartialPattern(label="Name", pattern=r"Name:[ \t]*([^\n]+)"),
        PartialPattern(label="Owner", pattern=r"Owner:[ \t]*([^\n]+)"),
        PartialPattern(label="Registered to", pattern=r"Registered to:[ \t]*([^\n]+)"),
    ])
    web_locators: List[str] = Field(default_factory=lambda: [
        '[data-testid="profile-name"]',
        '.profile-name',
        'h1[class*="name"], h2[class*="name"], h3[class*="name"]',
        '[class*="profile"] h1, [class*="profile"] h2',
        'span[class*="name"]',
        '.name',
        'h1',
    ])
    partial_rule: NameRule = Field(default_factory=lambda: PARTIAL_RULE.model_copy(deep=True))
    web_rule: NameRule = Field(default_factory=lambda: WEB_RULE.model_copy(deep=True))


class DebugSettings(BaseModel):
    screenshot_path: str = "/tmp/truecaller_debug.png"


class OpsLoggingSettings(BaseModel):
    ops_json: bool = False
    path: Optional[str] = None


class OpsSettings(BaseModel):
    logging: OpsLoggingSettings = Field(default_factory=OpsLoggingSettings)


class LookupSettings(BaseModel):
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    debug: DebugSettings = Field(default_factory=DebugSettings)
    ops: OpsSettings = Field(default_factory=OpsSettings)


def _apply_env(settings: LookupSettings) -> LookupSettings:
    region = os.environ.get("PNL_REGION_CODE")
    if region:
        settings.provider.region_code = region.strip()
    shot = os.environ.get("PNL_DEBUG_SCREENSHOT")
    if shot:
        settings.debug.screenshot_path = shot
    if os.environ.get("PNL_OPS_JSON", "0") == "1":
        settings.ops.logging.ops_json = True
    return settings


def load_settings(config_path: Path | str | None = None) -> LookupSettings:
    """Load settings from an optional YAML file, then apply env overrides."""
    cfg: dict = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists() or not path.is_file():
            raise ConfigError(f"file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"cannot read {path}: {e}") from e
        if not isinstance(cfg, dict):
            raise ConfigError(f"expected a mapping at the top of {path}")
    try:
        settings = LookupSettings.model_validate(cfg)
    except ValidationError as e:
        raise ConfigError(f"invalid settings: {e}") from e
    return _apply_env(settings)
