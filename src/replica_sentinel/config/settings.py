"""Settings model — pydantic-settings with env var support."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic_settings import BaseSettings

ENV_PREFIX = "SENTINEL_"


class NodeSettings(BaseModel):
    """One statically configured monitoring target."""

    host: str
    port: int
    group_id: int
    term_id: int


class Settings(BaseSettings):
    """Sentinel settings.

    Use ``ConfigLoader.load_settings()`` to build with YAML + env var layering.
    Direct construction (e.g. in tests) skips YAML loading.
    """

    nodes: list[NodeSettings] = []
    heartbeat_payload: str = ""
    connect_timeout: float = 3.0
    read_timeout: float = 3.0
    max_reply_bytes: int = 65536
    strict_reply_size: bool = False
    node_delay_seconds: float = 1.0
    cycle_delay_seconds: float = 10.0
    scheduler_enabled: bool = True
    sink_url: str = ""
    log_level: str = "INFO"
    max_group_id: int = 100
    cloud_access_key: str = ""
    cloud_secret_key: str = ""
    cloud_endpoint_override: str = ""
    cloud_bucket_region: str = ""

    model_config = {"env_prefix": ENV_PREFIX}
