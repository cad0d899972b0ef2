"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ORDER_OPT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Order Optimizer API"
    api_prefix: str = "/api"
    data_root: Path = Field(
        default=Path("files"),
        description="Directory containing the 'orders' and 'configuration' record directories.",
    )
    orders_dirname: str = Field(default="orders", description="Name of directories holding daily order files.")
    configuration_dirname: str = Field(
        default="configuration",
        description="Name of directories holding product configuration files.",
    )
    record_suffixes: tuple[str, ...] = Field(default=(".yaml", ".yml"))
    log_file: Optional[Path] = Field(
        default=None,
        description="Append-only diagnostic log. Defaults to <records root>/outputs/order_optimizer.log.",
    )
    marker_frame_id: str = Field(default="order_path")
    scan_max_workers: int = Field(default=8, ge=1)
    strict_duplicate_orders: bool = Field(
        default=False,
        description="Fail the request instead of warning when an order id appears in several day files.",
    )
    result_webhook_url: Optional[str] = Field(
        default=None,
        description="If set, marker payloads are also POSTed to this URL.",
    )
    result_webhook_timeout_seconds: float = Field(default=5.0, gt=0.0)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "log_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", "record_suffixes", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
