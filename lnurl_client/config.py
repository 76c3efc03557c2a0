"""Configuration management for the LNURL client."""

import os
import logging
from typing import Literal, Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """
    Client configuration loaded from environment variables.

    Uses pydantic-settings for validation and .env file support.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Lightning Node Configuration
    cln_rpc_path: str = Field(
        default="~/.lightning/testnet4/lightning-rpc",
        description="Path to the Core Lightning RPC socket",
    )
    node_backend: Literal["rpc", "cli"] = Field(
        default="rpc",
        description="How to reach the node: unix socket RPC or lightning-cli",
    )
    lightning_cli: str = Field(
        default="lightning-cli",
        description="Path or command name for the lightning-cli binary",
    )
    local_node_host: str = Field(
        default="127.0.0.1",
        description="Host advertised in our node URI for channel requests",
    )
    local_node_port: int = Field(
        default=49735,
        description="Port advertised in our node URI for channel requests",
    )

    # LNURL Server Configuration
    http_timeout: float = Field(
        default=60.0,
        description="Timeout for requests to LNURL servers (seconds)",
    )
    channel_request_path: str = Field(
        default="request-channel",
        description="Path segment of the channel request endpoint",
    )
    withdraw_request_path: str = Field(
        default="request-withdraw",
        description="Path segment of the withdraw request endpoint",
    )
    auth_challenge_path: str = Field(
        default="auth-challenge",
        description="Path segment of the auth challenge endpoint",
    )
    auth_response_path: str = Field(
        default="auth-response",
        description="Path segment of the auth response endpoint",
    )

    # Application Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Log file path",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("cln_rpc_path")
    @classmethod
    def expand_rpc_path(cls, v: str) -> str:
        """Expand ~ in the RPC socket path."""
        return os.path.expanduser(v)

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        """Validate HTTP timeout."""
        if v <= 0:
            raise ValueError("HTTP timeout must be positive")
        return v

    @field_validator("local_node_port")
    @classmethod
    def validate_local_node_port(cls, v: int) -> int:
        """Validate advertised port."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Invalid port: {v}")
        return v

    @field_validator(
        "channel_request_path",
        "withdraw_request_path",
        "auth_challenge_path",
        "auth_response_path",
    )
    @classmethod
    def validate_path_segment(cls, v: str) -> str:
        """Strip slashes from endpoint path segments."""
        v = v.strip().strip("/")
        if not v:
            raise ValueError("Endpoint path must not be empty")
        return v

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        # Create logs directory if needed
        if self.log_file:
            log_path = Path(self.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        handlers = []

        # stderr keeps stdout free for command output
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(log_format))
        handlers.append(console_handler)

        if self.log_file:
            try:
                file_handler = logging.FileHandler(self.log_file)
                file_handler.setFormatter(logging.Formatter(log_format))
                handlers.append(file_handler)
            except OSError as e:
                logger.warning(f"Could not create log file: {e}")

        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format=log_format,
            handlers=handlers,
            force=True,
        )

        logger.info(f"Logging configured: level={self.log_level}")
        if self.log_file:
            logger.info(f"Log file: {self.log_file}")

    def local_node_address(self) -> str:
        """Get the host:port advertised for this node."""
        return f"{self.local_node_host}:{self.local_node_port}"

    def get_node_config(self) -> dict:
        """Get node client configuration as dictionary."""
        return {
            "backend": self.node_backend,
            "rpc_path": self.cln_rpc_path,
            "lightning_cli": self.lightning_cli,
        }

    def __repr__(self) -> str:
        return (
            f"Config(cln_rpc_path={self.cln_rpc_path}, "
            f"node_backend={self.node_backend}, "
            f"log_level={self.log_level})"
        )


def load_config(env_file: Optional[str] = None) -> Config:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file (default: .env)

    Returns:
        Config instance

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    try:
        if env_file:
            config = Config(_env_file=env_file)
        else:
            config = Config()
        logger.debug("Configuration loaded successfully")
        return config
    except Exception as e:
        logger.debug(f"Failed to load configuration: {e}")
        raise
