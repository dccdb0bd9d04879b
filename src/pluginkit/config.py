from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_UPSTREAM = Path("~/ghq/github.com/affaan-m/everything-claude-code")


@dataclass(slots=True)
class EnvConfig:
    root: Path
    review_command: str
    upstream: Path
    log_level: str


def load_env() -> EnvConfig:
    load_dotenv()
    return EnvConfig(
        root=Path(os.getenv("PLUGINKIT_ROOT", ".")),
        review_command=os.getenv("PLUGINKIT_REVIEW_CMD", "codex"),
        upstream=Path(os.getenv("PLUGINKIT_UPSTREAM", str(DEFAULT_UPSTREAM))).expanduser(),
        log_level=os.getenv("PLUGINKIT_LOG_LEVEL", "WARNING").upper(),
    )
