"""Configuration schema using Pydantic.

Single data model and defaults for gatewayplay, persisted to ~/.gatewayplay/config.json.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class GatewayConfig(BaseModel):
    """Gateway server configuration."""
    host: str = "0.0.0.0"
    port: int = 9000
    # Service that POST /gateway delegates to (always plain http).
    upstream_host: str = "localhost"
    upstream_port: int = 8080
    upstream_timeout_seconds: float = 30.0
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    # Empty means the browser page bundled with the package.
    assets_dir: str = ""

    @property
    def upstream_base_url(self) -> str:
        return f"http://{self.upstream_host}:{self.upstream_port}"


class InvokerConfig(BaseModel):
    """Gateway invoker (client) configuration."""
    scheme: str = "https"
    # Host the invoker treats as "same origin", e.g. "localhost:9000".
    host: str = "localhost:9000"
    gateway_path: str = "/gateway"
    timeout_seconds: float | None = None  # None keeps the httpx default
    verify_tls: bool = True
    # Escape response fields before they are placed in the HTML fragment.
    escape_html: bool = True


class Config(BaseSettings):
    """Root configuration for gatewayplay."""
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    invoker: InvokerConfig = Field(default_factory=InvokerConfig)

    @property
    def assets_path(self) -> Path:
        """Directory served under /assets."""
        if self.gateway.assets_dir:
            return Path(self.gateway.assets_dir).expanduser()
        return Path(__file__).resolve().parent.parent / "gateway" / "assets"

    model_config = ConfigDict(
        env_prefix="GATEWAYPLAY_",
        env_nested_delimiter="__"
    )
