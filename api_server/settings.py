"""Startup configuration read from the environment"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from debate_core.config import LLM_MODEL, LLM_TIMEOUT_SECONDS


@dataclass(frozen=True)
class Settings:
    """Environment snapshot taken once when the app starts"""
    groq_api_key: Optional[str] = None
    llm_model: str = LLM_MODEL
    llm_timeout_seconds: float = LLM_TIMEOUT_SECONDS
    data_dir: Path = Path("data")
    session_timeout_minutes: int = 30

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            llm_model=os.getenv("LLM_MODEL", LLM_MODEL),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", str(LLM_TIMEOUT_SECONDS))),
            data_dir=Path(os.getenv("DATA_DIR", "data")),
            session_timeout_minutes=int(os.getenv("SESSION_TIMEOUT_MINUTES", "30")),
        )

    @property
    def store_path(self) -> Path:
        return self.data_dir / "debate_trainer.json"
