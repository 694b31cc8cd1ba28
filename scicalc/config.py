"""Configuration for SciCalc.

Settings are read from ``.scicalc/config.json`` under the project path.
Missing keys fall back to defaults, and a missing or unreadable file yields
the default configuration. Nothing is ever written back.
"""

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

CONFIG_DIR = ".scicalc"
CONFIG_FILE = "config.json"
API_KEY_ENV = "GEMINI_API_KEY"

DEFAULT_MODEL = "gemini-2.5-flash-preview-05-20"
DEFAULT_API_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)


@dataclass
class PlotConfig:
    """Sampling range for function tables (radians)."""

    x_start: float = -2 * math.pi
    x_end: float = 2 * math.pi
    step: float = 0.1


@dataclass
class AIConfig:
    """Remote text-generation settings."""

    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    timeout: float = 30.0

    @property
    def endpoint(self) -> str:
        """Return the generateContent URL for the configured model."""
        return self.api_url.format(model=self.model)


@dataclass
class VoiceConfig:
    """Speech recognition settings."""

    language: str = "en-US"
    timeout: float = 5.0


@dataclass
class CalculatorConfig:
    """Calculator configuration options."""

    precision: int = 10
    history_limit: int = 10
    error_token: str = "Error"
    plot: PlotConfig = field(default_factory=PlotConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)


def load_config(project_path: str = ".") -> CalculatorConfig:
    """Load calculator configuration from project config.

    Args:
        project_path: Path to project root.

    Returns:
        CalculatorConfig with settings from config.json or defaults.
    """
    config_file = Path(project_path) / CONFIG_DIR / CONFIG_FILE
    config = CalculatorConfig()

    if config_file.exists():
        try:
            with open(config_file) as f:
                data = json.load(f)
            config = _config_from_dict(data)
        except (json.JSONDecodeError, IOError, TypeError, ValueError):
            config = CalculatorConfig()

    if not config.ai.api_key:
        config.ai.api_key = os.environ.get(API_KEY_ENV) or None

    return config


def _config_from_dict(data: dict) -> CalculatorConfig:
    """Build a config from parsed JSON, keeping defaults for missing keys."""
    defaults = CalculatorConfig()
    plot = data.get("plot", {})
    ai = data.get("ai", {})
    voice = data.get("voice", {})

    return CalculatorConfig(
        precision=int(data.get("precision", defaults.precision)),
        history_limit=int(data.get("history_limit", defaults.history_limit)),
        error_token=data.get("error_token", defaults.error_token),
        plot=PlotConfig(
            x_start=float(plot.get("x_start", defaults.plot.x_start)),
            x_end=float(plot.get("x_end", defaults.plot.x_end)),
            step=float(plot.get("step", defaults.plot.step)),
        ),
        ai=AIConfig(
            model=ai.get("model", defaults.ai.model),
            api_url=ai.get("api_url", defaults.ai.api_url),
            api_key=ai.get("api_key"),
            timeout=float(ai.get("timeout", defaults.ai.timeout)),
        ),
        voice=VoiceConfig(
            language=voice.get("language", defaults.voice.language),
            timeout=float(voice.get("timeout", defaults.voice.timeout)),
        ),
    )
