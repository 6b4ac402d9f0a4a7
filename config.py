"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class KubeApiConfig:
    """Kubernetes API server connection settings."""

    base_url: str = "https://kubernetes.default.svc"
    token: str = ""  # Bearer token, usually a service account token
    ca_cert: str = ""  # Path to a CA bundle, empty for the system bundle
    verify_ssl: bool = True
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "KubeApiConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.getenv("KUBE_API_URL", "https://kubernetes.default.svc"),
            token=os.getenv("KUBE_API_TOKEN", ""),
            ca_cert=os.getenv("KUBE_CA_CERT", ""),
            verify_ssl=_env_bool("KUBE_VERIFY_SSL", True),
            timeout=int(os.getenv("KUBE_API_TIMEOUT", "30")),
        )


@dataclass
class AppConfig:
    """Application settings."""

    refresh_interval: int = 600  # seconds between schema definition refreshes
    log_level: str = "INFO"
    kube_api: Optional[KubeApiConfig] = None

    def __post_init__(self):
        """Fill in defaults."""
        if self.kube_api is None:
            self.kube_api = KubeApiConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            refresh_interval=int(os.getenv("SCHEMA_REFRESH_INTERVAL", "600")),
            log_level=os.getenv("SCHEMA_LOG_LEVEL", "INFO"),
            kube_api=KubeApiConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
