"""
Run configuration.

Options are resolved from (lowest to highest precedence):
  1. defaults on RunOptions
  2. a JSON config file (``config.json`` in the working directory if present)
  3. explicit overrides (CLI flags)
The provider key falls back to the PROVIDER_KEY / SERPER_API_KEY environment
variables, with ``.env`` loaded via python-dotenv.
"""

import json
import os
import re
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from models.enums import ProviderMode

DEFAULT_CONFIG_PATH = "config.json"
PROVIDER_KEY_ENV_VARS = ("PROVIDER_KEY", "SERPER_API_KEY")

DOMAIN_PATTERN = re.compile(
    r"^(?:www\.)?[a-zA-Z0-9][-a-zA-Z0-9]*(?:\.[a-zA-Z0-9][-a-zA-Z0-9]*)*$"
)


class ConfigError(Exception):
    """Invalid or incomplete run configuration."""


class RunOptions(BaseModel):
    """Fully resolved options for one batch run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    queries: List[str] = Field(default_factory=list, description="Search queries, run in order")
    domain: Optional[str] = Field(None, description="Target domain to rank")
    domains: List[str] = Field(default_factory=list, description="Additional target domains")
    max_results: int = Field(500, ge=0, description="Result budget per query (0 = unlimited)")
    location: str = "Singapore"
    language: str = "en"
    mode: ProviderMode = ProviderMode.SEARCH
    provider: str = "serper"
    provider_key: Optional[str] = None
    output_dir: str = "./output"
    page_delay: float = Field(1.0, ge=0, description="Seconds to wait between pages")
    ll: Optional[str] = Field(None, description="Map coordinates, e.g. '@1.29,103.85,14z'")
    resume: bool = True
    dataset: bool = False

    @field_validator("queries")
    @classmethod
    def strip_queries(cls, v: List[str]) -> List[str]:
        return [q.strip() for q in v if q and q.strip()]

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return _check_domain(v.strip())

    @field_validator("domains")
    @classmethod
    def validate_domains(cls, v: List[str]) -> List[str]:
        return [_check_domain(d.strip()) for d in v if d and d.strip()]

    @property
    def target_domains(self) -> List[str]:
        """Every configured target domain, ``domain`` first."""
        targets = [self.domain] if self.domain else []
        return targets + [d for d in self.domains if d not in targets]

    @property
    def unlimited(self) -> bool:
        return self.max_results == 0


def _check_domain(value: str) -> str:
    if not DOMAIN_PATTERN.match(value):
        raise ValueError(
            f"Invalid domain format: {value!r}. Use formats like example.com, "
            "www.example.com, or example (no http://, https://, or paths)"
        )
    return value


def load_options(config_path: Optional[str] = None, **overrides: Any) -> RunOptions:
    """
    Resolve RunOptions from config file, overrides and environment.

    Args:
        config_path: JSON config file. Defaults to ./config.json if it exists.
        **overrides: Field values (snake_case); None values are ignored.

    Raises:
        ConfigError: if the file is unreadable, a value is invalid, or no
            queries / provider key are configured.
    """
    load_dotenv()

    data: Dict[str, Any] = {}
    data.update(_read_config_file(config_path))
    data.update({k: v for k, v in overrides.items() if v is not None})

    if not data.get("provider_key"):
        for env_var in PROVIDER_KEY_ENV_VARS:
            if os.environ.get(env_var):
                data["provider_key"] = os.environ[env_var]
                break

    try:
        options = RunOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if not options.queries:
        raise ConfigError("No queries provided. Please add at least one search query.")
    if not options.provider_key:
        raise ConfigError(
            "Provider key is required. Set the PROVIDER_KEY environment variable "
            "or provide providerKey in the config."
        )
    return options


def _read_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Config file contents keyed by field name (camelCase or snake_case accepted)."""
    path = config_path
    if path is None:
        if not os.path.exists(DEFAULT_CONFIG_PATH):
            return {}
        path = DEFAULT_CONFIG_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error reading config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    data: Dict[str, Any] = {}
    for name, field in RunOptions.model_fields.items():
        if field.alias in raw:
            data[name] = raw[field.alias]
        elif name in raw:
            data[name] = raw[name]
    # Single-query shorthand
    if "queries" not in data and isinstance(raw.get("query"), str):
        data["queries"] = [raw["query"]]
    return data
