"""
Generation configuration: run defaults, job catalog, and config loading.

Values resolve in increasing precedence: dataclass defaults, YAML config file,
environment (optionally from a .env file), then explicit overrides.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, get_args

import yaml
from dotenv import load_dotenv

from .models import ConfigError


DEFAULT_CITY_API_URL = "https://random-city-api.vercel.app/api/random-city"
DEFAULT_OUTPUT_DIR = "prompts_with_data_api_cities_list_jobs"

MIN_AGE = 18
MAX_AGE = 90

JOB_TITLES: Tuple[str, ...] = (
    "Software Engineer", "Project Manager", "Data Scientist", "Product Manager", "Accountant",
    "Graphic Designer", "Marketing Manager", "Sales Representative", "Customer Service Representative",
    "Human Resources Manager", "Teacher", "Nurse", "Doctor", "Lawyer", "Chef", "Mechanic",
    "Electrician", "Plumber", "Consultant", "Analyst", "Administrator", "Receptionist",
    "Web Developer", "UX Designer", "System Administrator", "DevOps Engineer", "Business Analyst",
    "Financial Advisor", "Architect", "Civil Engineer", "Mechanical Engineer", "Artist", "Writer",
    "Editor", "Photographer", "Scientist", "Researcher", "Librarian", "Police Officer", "Firefighter",
)

# Environment variable -> config field
ENV_OVERRIDES: Dict[str, str] = {
    "PROMPT_DATA_CITY_API_URL": "city_api_url",
    "PROMPT_DATA_OUTPUT_DIR": "output_dir",
}


@dataclass
class GenerationConfig:
    """Settings for one generation run."""
    num_entries: int = 5000
    min_age: int = MIN_AGE
    max_age: int = MAX_AGE
    output_dir: str = DEFAULT_OUTPUT_DIR
    city_api_url: str = DEFAULT_CITY_API_URL
    num_cities_to_fetch: int = 150
    target_unique_cities: int = 100
    api_request_delay: float = 0.1
    request_timeout: float = 10.0
    random_seed: Optional[int] = None
    export_dataset: bool = False
    templates_path: Optional[str] = None

    def validate(self) -> None:
        """Raise ConfigError if any value is out of range."""
        if self.num_entries < 1:
            raise ConfigError("num_entries must be at least 1")
        if self.min_age > self.max_age:
            raise ConfigError(
                f"min_age ({self.min_age}) must not exceed max_age ({self.max_age})"
            )
        if self.num_cities_to_fetch < 1:
            raise ConfigError("num_cities_to_fetch must be at least 1")
        if self.target_unique_cities < 1:
            raise ConfigError("target_unique_cities must be at least 1")
        if self.api_request_delay < 0:
            raise ConfigError("api_request_delay must not be negative")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")

    def with_overrides(self, **overrides: Any) -> "GenerationConfig":
        """Return a copy with non-None overrides applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown config fields: {sorted(unknown)}")
        types = {f.name: f.type for f in fields(self)}
        values = {
            k: _check_field_type(k, v, types[k])
            for k, v in overrides.items()
            if v is not None
        }
        return replace(self, **values)


def load_config(
    config_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> GenerationConfig:
    """
    Build a GenerationConfig from defaults, an optional YAML file and the
    environment.

    Args:
        config_path: YAML file whose top-level keys are GenerationConfig fields
        env_file: Optional .env file to load before reading the environment

    Returns:
        A validated GenerationConfig
    """
    config = GenerationConfig()

    if config_path:
        config = config.with_overrides(**_read_yaml_config(Path(config_path)))

    load_dotenv(env_file)
    env_values = {
        field_name: os.environ[var]
        for var, field_name in ENV_OVERRIDES.items()
        if os.environ.get(var)
    }
    if env_values:
        config = config.with_overrides(**env_values)

    config.validate()
    return config


def _read_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Read the generation section of a YAML config file."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping")

    # Accept either a flat mapping or one nested under "generation"
    section = data.get("generation", data) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"generation section of {config_path} must be a mapping")
    return section


def _check_field_type(name: str, value: Any, field_type: Any) -> Any:
    """Return value if it fits the field type (ints widen to float), else raise ConfigError."""
    expected = next((t for t in get_args(field_type) if t is not type(None)), field_type)
    if isinstance(value, os.PathLike) and expected is str:
        return os.fspath(value)
    # bool is an int subclass; only bool fields take booleans
    if isinstance(value, bool) and expected is not bool:
        raise ConfigError(f"{name} must be {expected.__name__}, got {value!r}")
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise ConfigError(f"{name} must be {expected.__name__}, got {value!r}")
    return value
