"""Configuration helpers for the outfit matcher."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_CLASSIFIER_MODEL = "gemini-1.5-flash"
DEFAULT_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
DEFAULT_USER_AGENT = "OutfitMatcher/1.0"


@dataclass
class MatcherConfig:
    """Deployment settings for the engine's external collaborators.

    Only credentials and endpoints live here; scoring weights and thresholds are
    fixed module constants.
    """

    google_api_key: Optional[str] = None
    classifier_model: str = DEFAULT_CLASSIFIER_MODEL
    weather_base_url: str = DEFAULT_WEATHER_URL
    geocoding_base_url: str = DEFAULT_GEOCODING_URL
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "MatcherConfig":
        """Build a config from environment variables or an environment file.

        Environment specific files live in ``config/environments/<env>.yaml`` by
        default; environment variables take precedence so secrets can be
        injected by the runtime.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("MATCHER_CONFIG_DIR", "config/environments"))
        file_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_config_file(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(key.upper(), file_config.get(key, default))

        return cls(
            google_api_key=get_value("google_api_key") or None,
            classifier_model=str(get_value("classifier_model", DEFAULT_CLASSIFIER_MODEL)),
            weather_base_url=str(get_value("weather_base_url", DEFAULT_WEATHER_URL)),
            geocoding_base_url=str(get_value("geocoding_base_url", DEFAULT_GEOCODING_URL)),
            user_agent=str(get_value("user_agent", DEFAULT_USER_AGENT)),
            log_level=str(get_value("log_level", "INFO")),
            environment=env_name,
        )

    @staticmethod
    def _load_config_file(path: Path) -> dict:
        """Parse flat ``key: value`` lines, ignoring comments and blanks."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
                value = value[1:-1]
            config[key.strip()] = value
        return config
