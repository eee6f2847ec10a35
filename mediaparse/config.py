import logging
import os
import re
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from mediaparse.fetcher import DEFAULT_USER_AGENT


CONFIG_PATH = Path(__file__).parent / "config.yaml"
CONFIG_ENV_VAR = "MEDIAPARSE_CONFIG"


class Settings(BaseModel):
    debug: bool = False
    timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds.")
    user_agent: str = DEFAULT_USER_AGENT
    max_idle_connections: int = Field(100, ge=1)
    max_connections_per_host: int = Field(10, ge=1)
    browser_timeout: float = Field(60.0, gt=0)
    workers: Optional[int] = Field(None, ge=1, description="Overrides every site's worker count.")
    target_count: Optional[int] = Field(None, ge=1, description="Overrides every site's link target.")
    max_pages: Optional[int] = Field(None, ge=1, description="Overrides every site's page ceiling.")
    store: bool = False
    db_path: str = "data/articles.json"
    articles_table: str = "articles"


def setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    for name in ("urllib3", "scrapy", "asyncio"):
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def load_config(config_path: Union[str, Path, None] = None) -> dict:
    """
    Read the YAML config. ``.env`` is loaded first so MEDIAPARSE_CONFIG
    can point at another file; keys ending in ``_path`` become absolute.
    """
    load_dotenv()
    config_path = config_path or os.getenv(CONFIG_ENV_VAR) or CONFIG_PATH
    with open(config_path, "r") as f:
        yaml_config = yaml.safe_load(f) or {}

    for key, value in yaml_config.items():
        if re.search(r'_path$', key) and value:
            yaml_config[key] = os.path.abspath(value)

    return yaml_config


def load_settings(config_path: Union[str, Path, None] = None, **overrides) -> Settings:
    """Build Settings from the YAML config, then apply non-None overrides."""
    config = load_config(config_path)
    config.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**config)
