"""Data classes for debate practice"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Who speaks during a stage"""
    USER = "user"
    OPPONENT = "opponent"


class SessionState(str, Enum):
    """Coarse state of a practice session"""
    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_OPPONENT_REPLY = "awaiting_opponent_reply"
    COMPLETE = "complete"


class Side(str, Enum):
    """Position argued on a topic"""
    FOR = "for"
    AGAINST = "against"

    @property
    def opposite(self) -> "Side":
        return Side.AGAINST if self is Side.FOR else Side.FOR


@dataclass(frozen=True)
class StageTemplate:
    """One entry of a format's stage structure

    Missing role and duration are filled in when the session is created.
    """
    name: str
    speaker_role: Optional[Role] = None
    duration_seconds: Optional[int] = None


@dataclass(frozen=True)
class DebateFormat:
    """A named debate format and its ordered stage structure"""
    id: str
    name: str
    structure: tuple[Union[str, StageTemplate], ...]
    description: str = ""
    difficulty: str = "Intermediate"
    participants: str = "1v1"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "difficulty": self.difficulty,
            "participants": self.participants,
            "structure": [
                entry if isinstance(entry, str) else entry.name
                for entry in self.structure
            ],
        }


@dataclass(frozen=True)
class Stage:
    """A named, timed segment of a session with a fixed speaking role"""
    name: str
    allocated_duration_seconds: int
    speaker_role: Role
    prompt_text: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "allocated_duration_seconds": self.allocated_duration_seconds,
            "speaker_role": self.speaker_role.value,
            "prompt_text": self.prompt_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stage":
        return cls(
            name=data["name"],
            allocated_duration_seconds=int(data["allocated_duration_seconds"]),
            speaker_role=Role(data["speaker_role"]),
            prompt_text=data.get("prompt_text", ""),
        )


@dataclass(frozen=True)
class Message:
    """A single transcript entry; never mutated after creation"""
    speaker_role: Role
    content: str
    stage_name: str
    elapsed_seconds: Optional[int] = None
    fallacies: tuple[str, ...] = ()
    coaching: Optional[str] = None
    id: str = field(default_factory=lambda: f"msg_{uuid.uuid4().hex[:12]}")
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "speaker_role": self.speaker_role.value,
            "content": self.content,
            "elapsed_seconds": self.elapsed_seconds,
            "created_at": self.created_at.isoformat(),
            "stage_name": self.stage_name,
            "fallacies": list(self.fallacies),
            "coaching": self.coaching,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        return cls(
            id=data["id"],
            speaker_role=Role(data["speaker_role"]),
            content=data["content"],
            elapsed_seconds=data.get("elapsed_seconds"),
            created_at=datetime.fromisoformat(data["created_at"]),
            stage_name=data["stage_name"],
            fallacies=tuple(data.get("fallacies") or ()),
            coaching=data.get("coaching"),
        )


@dataclass(frozen=True)
class Session:
    """One run through a sequence of stages

    Instances are immutable; the controller returns a new value for every
    transition.
    """
    topic: str
    format_name: str
    stages: tuple[Stage, ...]
    current_stage_index: int = 0
    remaining_seconds: int = 0
    is_user_turn: bool = True
    transcript: tuple[Message, ...] = ()
    timer_running: bool = False
    awaiting_reply: bool = False
    completed: bool = False
    user_side: Side = Side.FOR
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utcnow)

    @property
    def current_stage(self) -> Stage:
        return self.stages[self.current_stage_index]

    @property
    def state(self) -> SessionState:
        if self.completed:
            return SessionState.COMPLETE
        if self.awaiting_reply:
            return SessionState.AWAITING_OPPONENT_REPLY
        return SessionState.AWAITING_USER_INPUT

    def evolve(self, **changes) -> "Session":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "topic": self.topic,
            "format_name": self.format_name,
            "user_side": self.user_side.value,
            "stages": [stage.to_dict() for stage in self.stages],
            "current_stage_index": self.current_stage_index,
            "remaining_seconds": self.remaining_seconds,
            "is_user_turn": self.is_user_turn,
            "transcript": [message.to_dict() for message in self.transcript],
            "timer_running": self.timer_running,
            "awaiting_reply": self.awaiting_reply,
            "completed": self.completed,
            "state": self.state.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            session_id=data["session_id"],
            topic=data["topic"],
            format_name=data["format_name"],
            user_side=Side(data.get("user_side", Side.FOR.value)),
            stages=tuple(Stage.from_dict(s) for s in data["stages"]),
            current_stage_index=int(data["current_stage_index"]),
            remaining_seconds=int(data["remaining_seconds"]),
            is_user_turn=bool(data["is_user_turn"]),
            transcript=tuple(Message.from_dict(m) for m in data["transcript"]),
            timer_running=bool(data.get("timer_running", False)),
            awaiting_reply=bool(data.get("awaiting_reply", False)),
            completed=bool(data.get("completed", False)),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass(frozen=True)
class DebateTopic:
    """A debate motion with both positions"""
    id: str
    title: str
    description: str
    difficulty: int
    for_position: str
    against_position: str
    category: str = "general"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "for_position": self.for_position,
            "against_position": self.against_position,
            "category": self.category,
        }


@dataclass(frozen=True)
class FallacyExample:
    """An argument to inspect for a logical fallacy"""
    id: str
    type: str
    argument: str
    explanation: str
    difficulty: int
    has_fallacy: bool = True
    fallacy_location: Optional[tuple[int, int]] = None

    def to_dict(self, reveal: bool = True) -> dict:
        data = {
            "id": self.id,
            "argument": self.argument,
            "difficulty": self.difficulty,
        }
        if reveal:
            data.update({
                "type": self.type,
                "explanation": self.explanation,
                "has_fallacy": self.has_fallacy,
                "fallacy_location": list(self.fallacy_location) if self.fallacy_location else None,
            })
        return data


@dataclass
class UserProgress:
    """Lightweight per-user progress record"""
    user_id: str
    skill_level: float = 1.0
    fallacy_accuracy_history: dict[str, float] = field(default_factory=dict)
    common_mistakes: list[str] = field(default_factory=list)
    last_performance_score: float = 0.0
    total_practice_count: int = 0
    total_debate_count: int = 0
    preferred_topics: list[str] = field(default_factory=list)
    badges_earned: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def weak_areas(self, threshold: float = 0.7) -> list[str]:
        """Fallacy types answered with accuracy below threshold"""
        return [
            fallacy_type
            for fallacy_type, accuracy in self.fallacy_accuracy_history.items()
            if accuracy < threshold
        ]

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "skill_level": self.skill_level,
            "fallacy_accuracy_history": dict(self.fallacy_accuracy_history),
            "common_mistakes": list(self.common_mistakes),
            "last_performance_score": self.last_performance_score,
            "total_practice_count": self.total_practice_count,
            "total_debate_count": self.total_debate_count,
            "preferred_topics": list(self.preferred_topics),
            "badges_earned": list(self.badges_earned),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProgress":
        return cls(
            user_id=data["user_id"],
            skill_level=float(data.get("skill_level", 1.0)),
            fallacy_accuracy_history=dict(data.get("fallacy_accuracy_history") or {}),
            common_mistakes=list(data.get("common_mistakes") or []),
            last_performance_score=float(data.get("last_performance_score", 0.0)),
            total_practice_count=int(data.get("total_practice_count", 0)),
            total_debate_count=int(data.get("total_debate_count", 0)),
            preferred_topics=list(data.get("preferred_topics") or []),
            badges_earned=list(data.get("badges_earned") or []),
            created_at=datetime.fromisoformat(data["created_at"]) if "created_at" in data else utcnow(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if "updated_at" in data else utcnow(),
        )
