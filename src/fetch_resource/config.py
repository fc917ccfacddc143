"""
Configuration for fetch_resource.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union
from urllib.parse import urlparse

logger = logging.getLogger("fetch_resource.config")

ENV_PREFIX = "FETCH_RESOURCE_"


def _mask_sensitive(value: Optional[str], visible_chars: int = 4) -> str:
    """Mask sensitive value for safe logging."""
    if value is None:
        return "<None>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def _is_ssl_verify_disabled_by_env(environ: Mapping[str, str]) -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


@dataclass
class ClientConfig:
    """Client configuration.

    ``account_sid`` fills the ``{AccountSid}`` placeholder of every
    resource path and, together with ``auth_token``, is sent as HTTP basic
    credentials by the default transport.
    """

    base_url: str
    account_sid: Optional[str] = None
    auth_token: Optional[str] = None
    timeout: Union[TimeoutConfig, float, None] = None
    headers: Dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    debug: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "ClientConfig":
        """Build a config from FETCH_RESOURCE_* environment variables.

        Keyword overrides take precedence over the environment.
        """
        env = os.environ if environ is None else environ
        timeout: Optional[float] = None
        raw_timeout = env.get(f"{ENV_PREFIX}TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ValueError(f"Invalid {ENV_PREFIX}TIMEOUT: {raw_timeout!r}") from e

        values = {
            "base_url": env.get(f"{ENV_PREFIX}BASE_URL", ""),
            "account_sid": env.get(f"{ENV_PREFIX}ACCOUNT_SID"),
            "auth_token": env.get(f"{ENV_PREFIX}AUTH_TOKEN"),
            "timeout": timeout,
            "verify_ssl": not _is_ssl_verify_disabled_by_env(env),
            "debug": _env_flag(env.get(f"{ENV_PREFIX}DEBUG")),
        }
        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        """Safe repr that masks the auth token."""
        return (
            f"ClientConfig(base_url={self.base_url!r}, "
            f"account_sid={self.account_sid!r}, "
            f"auth_token={_mask_sensitive(self.auth_token)!r}, "
            f"timeout={self.timeout!r}, "
            f"headers={list(self.headers)!r}, "
            f"verify_ssl={self.verify_ssl!r}, "
            f"debug={self.debug!r})"
        )


# Default values
DEFAULT_TIMEOUT = TimeoutConfig()


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return DEFAULT_TIMEOUT
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


def validate_config(config: ClientConfig) -> None:
    """Validate client configuration."""
    if not config.base_url:
        raise ValueError("base_url is required")

    parsed = urlparse(config.base_url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid base_url: {config.base_url}")

    timeout = normalize_timeout(config.timeout)
    for name in ("connect", "read", "write"):
        if getattr(timeout, name) <= 0:
            raise ValueError(f"timeout.{name} must be positive")

    if config.auth_token and not config.account_sid:
        raise ValueError("auth_token requires account_sid")


@dataclass
class ResolvedConfig:
    """Resolved client configuration with defaults applied."""

    base_url: str
    account_sid: Optional[str]
    auth_token: Optional[str]
    timeout: TimeoutConfig
    headers: Dict[str, str]
    verify_ssl: bool
    debug: bool

    @property
    def default_segments(self) -> Dict[str, str]:
        """Url segments every request gets unless the operation sets them."""
        if self.account_sid:
            return {"AccountSid": self.account_sid}
        return {}

    def __repr__(self) -> str:
        return (
            f"ResolvedConfig(base_url={self.base_url!r}, "
            f"account_sid={self.account_sid!r}, "
            f"auth_token={_mask_sensitive(self.auth_token)!r}, "
            f"timeout={self.timeout!r}, verify_ssl={self.verify_ssl!r}, "
            f"debug={self.debug!r})"
        )


def resolve_config(config: ClientConfig) -> ResolvedConfig:
    """Resolve client configuration with defaults."""
    validate_config(config)

    if not config.verify_ssl:
        logger.warning(f"SSL verification disabled for {config.base_url}")

    # Paths are joined relative to the base, which must end with a slash
    base_url = config.base_url if config.base_url.endswith("/") else config.base_url + "/"

    return ResolvedConfig(
        base_url=base_url,
        account_sid=config.account_sid,
        auth_token=config.auth_token,
        timeout=normalize_timeout(config.timeout),
        headers=dict(config.headers),
        verify_ssl=config.verify_ssl,
        debug=config.debug,
    )
