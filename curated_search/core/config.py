"""Configuration from environment variables (.env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    project_root: Path
    mcp_first: bool
    mcp_only_for_best_practices: bool
    fallback_to_web: bool
    min_confidence_threshold: float
    searxng_url: str
    web_search_timeout: float
    telemetry_enabled: bool
    telemetry_max_events: int
    telemetry_echo: bool
    log_level: str
    log_file: Path | None

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        log_file = os.getenv("LOG_FILE", "").strip()
        return cls(
            project_root=project_root,
            mcp_first=_env_bool("ROUTER_MCP_FIRST", True),
            mcp_only_for_best_practices=_env_bool("ROUTER_MCP_ONLY_FOR_BEST_PRACTICES", False),
            fallback_to_web=_env_bool("ROUTER_FALLBACK_TO_WEB", True),
            min_confidence_threshold=float(os.getenv("ROUTER_MIN_CONFIDENCE", "0.6")),
            searxng_url=os.getenv("SEARXNG_URL", ""),
            web_search_timeout=float(os.getenv("WEB_SEARCH_TIMEOUT", "10.0")),
            telemetry_enabled=_env_bool("TELEMETRY_ENABLED", True),
            telemetry_max_events=int(os.getenv("TELEMETRY_MAX_EVENTS", "1000")),
            telemetry_echo=_env_bool("TELEMETRY_ECHO", False),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            log_file=Path(log_file) if log_file else None,
        )

    def validate(self) -> list[str]:
        errors = []
        if not 0.0 <= self.min_confidence_threshold <= 1.0:
            # Accepted as-is by the router; reported so operators notice.
            errors.append(
                f"ROUTER_MIN_CONFIDENCE outside [0, 1]: {self.min_confidence_threshold}"
            )
        if self.telemetry_max_events < 1:
            errors.append(f"TELEMETRY_MAX_EVENTS must be positive: {self.telemetry_max_events}")
        if self.web_search_timeout <= 0:
            errors.append(f"WEB_SEARCH_TIMEOUT must be positive: {self.web_search_timeout}")
        if self.log_file is not None and not self.log_file.parent.exists():
            errors.append(f"Log directory not found: {self.log_file.parent}")
        return errors


config = Config.load()
