"""Best-effort storage for user progress and session logs

Nothing here may raise into the session flow: failures are logged and the
caller carries on with in-memory state.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional, Protocol

from .types import Session, UserProgress, utcnow

logger = logging.getLogger(__name__)

USER_PROGRESS_PREFIX = "user_progress:"
DEBATE_SESSIONS_PREFIX = "debate_sessions:"


class KeyValueStore(Protocol):
    def save(self, key: str, record) -> None:
        ...

    def load(self, key: str) -> Optional[object]:
        ...


class InMemoryStore:
    """Key-value store kept in a dict"""

    def __init__(self):
        self._data: dict = {}

    def save(self, key: str, record) -> None:
        self._data[key] = json.loads(json.dumps(record))

    def load(self, key: str) -> Optional[object]:
        return self._data.get(key)


class JsonFileStore:
    """Key-value store backed by a single JSON file; last write wins"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def save(self, key: str, record) -> None:
        with self._lock:
            try:
                try:
                    data = self._read_all()
                except ValueError as e:
                    logger.error(str({"event": "store_corrupt_overwritten", "path": str(self.path), "error": str(e)}))
                    data = {}
                data[key] = record
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
                with tmp_path.open("w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except (OSError, ValueError, TypeError) as e:
                logger.error(str({"event": "store_save_failed", "key": key, "error": str(e)}))

    def load(self, key: str) -> Optional[object]:
        with self._lock:
            try:
                return self._read_all().get(key)
            except (OSError, ValueError) as e:
                logger.error(str({"event": "store_load_failed", "key": key, "error": str(e)}))
                return None


def debate_score(message_count: int, completed: bool) -> int:
    """Engagement score out of 100 for a debate run"""
    base_score = 60
    engagement_bonus = min(30, message_count * 3)
    completion_bonus = 10 if completed else 0
    return min(100, base_score + engagement_bonus + completion_bonus)


class ProgressService:
    """Reads and updates user progress records"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_progress(self, user_id: str) -> UserProgress:
        data = self.store.load(USER_PROGRESS_PREFIX + user_id)
        if not data:
            return UserProgress(user_id=user_id)
        try:
            return UserProgress.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(str({"event": "progress_corrupt", "user_id": user_id, "error": str(e)}))
            return UserProgress(user_id=user_id)

    def save_progress(self, progress: UserProgress) -> None:
        progress.updated_at = utcnow()
        self.store.save(USER_PROGRESS_PREFIX + progress.user_id, progress.to_dict())

    def record_fallacy_attempt(self, user_id: str, fallacy_type: str, correct: bool) -> UserProgress:
        progress = self.get_progress(user_id)

        accuracy = progress.fallacy_accuracy_history.get(fallacy_type, 0.0)
        if correct:
            accuracy = min(1.0, accuracy + 0.1)
        else:
            accuracy = max(0.0, accuracy - 0.05)
            if fallacy_type not in progress.common_mistakes:
                progress.common_mistakes.append(fallacy_type)

        skill_adjustment = 0.02 if correct else -0.01
        progress.skill_level = max(1.0, min(5.0, progress.skill_level + skill_adjustment))
        progress.fallacy_accuracy_history[fallacy_type] = round(accuracy, 4)
        progress.last_performance_score = 1.0 if correct else 0.0
        progress.total_practice_count += 1

        self.save_progress(progress)
        return progress

    def record_debate(self, user_id: str, session: Session) -> UserProgress:
        """Log a finished session and update the debate totals"""
        key = DEBATE_SESSIONS_PREFIX + user_id
        history = [
            entry for entry in self._load_history(user_id)
            if entry.get("session_id") != session.session_id
        ]
        history.append(session.to_dict())
        self.store.save(key, history)

        progress = self.get_progress(user_id)
        progress.total_debate_count += 1
        progress.last_performance_score = debate_score(len(session.transcript), session.completed) / 100
        self.save_progress(progress)
        return progress

    def _load_history(self, user_id: str) -> list[dict]:
        history = self.store.load(DEBATE_SESSIONS_PREFIX + user_id)
        if history is None:
            return []
        if not isinstance(history, list):
            logger.error(str({"event": "session_log_corrupt", "user_id": user_id}))
            return []
        return [entry for entry in history if isinstance(entry, dict)]

    def session_history(self, user_id: str) -> list[dict]:
        return self._load_history(user_id)
