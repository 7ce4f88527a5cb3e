"""
Centralized configuration for the prompt A/B test service
"""
import json
import os
from pathlib import Path
from typing import Any, Optional


class Config:
    """Application configuration"""

    # Datadog Configuration
    DD_SERVICE: str = os.getenv("DD_SERVICE", "prompt-ab-test")
    DD_ENV: str = os.getenv("DD_ENV", "production")
    DD_VERSION: str = os.getenv("DD_VERSION", "0.1.0")

    # Application Settings
    APP_NAME: str = "Prompt A/B Test"
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Metrics go to the local dogstatsd agent; turn off where no agent runs
    METRICS_ENABLED: bool = os.getenv("PROMPT_AB_METRICS_ENABLED", "true").lower() == "true"

    # =========================================================================
    # Experiment configuration
    # =========================================================================
    # Inline JSON wins over the file path. Both accept either
    #   {"experiments": [...]}
    # or a bare list of experiment definitions.
    # Nothing configured means the plugin starts idle.
    # =========================================================================
    PROMPT_AB_CONFIG_JSON: str = os.getenv("PROMPT_AB_CONFIG_JSON", "")
    PROMPT_AB_CONFIG_PATH: str = os.getenv("PROMPT_AB_CONFIG_PATH", "")

    # Markdown prompt fragments used by /prompt/render
    PROMPTS_DIR: str = os.getenv(
        "PROMPTS_DIR", str(Path(__file__).resolve().parent / "prompt_templates")
    )

    @classmethod
    def load_plugin_config(
        cls,
        inline: Optional[str] = None,
        path: Optional[str] = None,
    ) -> Any:
        """
        Load the raw experiment configuration.

        Args:
            inline: JSON text, defaults to PROMPT_AB_CONFIG_JSON
            path: JSON file path, defaults to PROMPT_AB_CONFIG_PATH

        Returns:
            Parsed JSON data, or an empty config when nothing is set

        Raises:
            ValueError: if the source exists but cannot be read or parsed.
        """
        inline = cls.PROMPT_AB_CONFIG_JSON if inline is None else inline
        path = cls.PROMPT_AB_CONFIG_PATH if path is None else path

        if inline.strip():
            try:
                return json.loads(inline)
            except json.JSONDecodeError as e:
                # FAIL CLOSED: a broken config must not silently disable experiments
                raise ValueError(f"PROMPT_AB_CONFIG_JSON is not valid JSON: {e}") from e

        if path:
            try:
                return json.loads(Path(path).read_text(encoding="utf-8"))
            except OSError as e:
                raise ValueError(f"Cannot read experiment config {path}: {e}") from e
            except json.JSONDecodeError as e:
                raise ValueError(f"Experiment config {path} is not valid JSON: {e}") from e

        return {"experiments": []}


config = Config()
