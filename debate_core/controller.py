"""Session/timer controller

Pure state transitions over immutable Session values. Every function returns
a new Session (or the same one for a no-op) and never mutates its argument.
"""

import asyncio
import logging
from typing import Optional

from llm_client import LLMError

from .config import (
    CROSS_EXAMINATION_SECONDS,
    DEFAULT_STAGE_SECONDS,
    LLM_TIMEOUT_SECONDS,
    REBUTTAL_SECONDS,
)
from .exceptions import ConfigurationError, InvalidTurnError
from .fallback import (
    Selector,
    coaching_tip,
    fallback_reply,
    maybe_inject_fallacy,
    pick_persona,
)
from .opponent import CounterArgumentSource
from .prompts import stage_prompt
from .types import (
    DebateFormat,
    Message,
    Role,
    Session,
    SessionState,
    Side,
    Stage,
    StageTemplate,
)

logger = logging.getLogger(__name__)


def stage_duration(stage_name: str) -> int:
    """Default duration in seconds for a stage name"""
    if "Cross" in stage_name:
        return CROSS_EXAMINATION_SECONDS
    if "Rebuttal" in stage_name:
        return REBUTTAL_SECONDS
    return DEFAULT_STAGE_SECONDS


def build_stages(fmt: DebateFormat) -> tuple[Stage, ...]:
    """Expand a format's structure into concrete stages

    Entries without an explicit role alternate by position starting with the
    user. Explicit roles are kept as given, so consecutive stages may share a
    speaker.

    Raises:
        ConfigurationError: If the structure is empty or an entry is invalid
    """
    if not fmt.structure:
        raise ConfigurationError(f"Format '{fmt.name}' has no stages")

    stages = []
    for index, entry in enumerate(fmt.structure):
        template = StageTemplate(name=entry) if isinstance(entry, str) else entry
        name = (template.name or "").strip()
        if not name:
            raise ConfigurationError(f"Format '{fmt.name}' has an unnamed stage at position {index}")

        duration = template.duration_seconds
        if duration is None:
            duration = stage_duration(name)
        if duration <= 0:
            raise ConfigurationError(
                f"Stage '{name}' in format '{fmt.name}' must have a positive duration, got {duration}"
            )

        role = template.speaker_role
        if role is None:
            role = Role.USER if index % 2 == 0 else Role.OPPONENT

        stages.append(Stage(
            name=name,
            allocated_duration_seconds=duration,
            speaker_role=role,
            prompt_text=stage_prompt(name, role),
        ))
    return tuple(stages)


def create_session(topic: str, fmt: DebateFormat, user_side: Side = Side.FOR) -> Session:
    """Create a session positioned at its first stage with a full, paused timer"""
    stages = build_stages(fmt)
    session = Session(
        topic=topic,
        format_name=fmt.name,
        stages=stages,
        current_stage_index=0,
        remaining_seconds=stages[0].allocated_duration_seconds,
        is_user_turn=stages[0].speaker_role is Role.USER,
        user_side=user_side,
    )
    logger.info(str({
        "event": "session_created",
        "session_id": session.session_id,
        "format": fmt.name,
        "stages": len(stages),
    }))
    return session


def start_timer(session: Session) -> Session:
    # The countdown only exists while input is awaited.
    if session.timer_running or session.state is not SessionState.AWAITING_USER_INPUT:
        return session
    return session.evolve(timer_running=True)


def pause_timer(session: Session) -> Session:
    if not session.timer_running:
        return session
    return session.evolve(timer_running=False)


def tick(session: Session) -> Session:
    """Count down one second while the timer runs"""
    if not session.timer_running or session.remaining_seconds <= 0:
        return session
    return session.evolve(remaining_seconds=session.remaining_seconds - 1)


def _advance(session: Session) -> Session:
    next_index = session.current_stage_index + 1
    if next_index >= len(session.stages):
        logger.info(str({"event": "session_complete", "session_id": session.session_id}))
        return session.evolve(
            completed=True,
            remaining_seconds=0,
            is_user_turn=False,
            timer_running=False,
            awaiting_reply=False,
        )

    stage = session.stages[next_index]
    return session.evolve(
        current_stage_index=next_index,
        remaining_seconds=stage.allocated_duration_seconds,
        is_user_turn=stage.speaker_role is Role.USER,
        timer_running=False,
        awaiting_reply=False,
    )


def advance_stage_manually(session: Session) -> Session:
    """Host-controlled skip to the next stage without a submission"""
    if session.completed:
        raise InvalidTurnError("Session is complete")
    if session.awaiting_reply:
        raise InvalidTurnError("Cannot advance while the opponent reply is pending")
    return _advance(session)


def begin_user_turn(session: Session, text: str) -> Session:
    """Record the user's submission and pause the timer

    The returned session is AWAITING_OPPONENT_REPLY.

    Raises:
        InvalidTurnError: If it is not the user's turn, time ran out, or text is blank
    """
    if session.completed:
        raise InvalidTurnError("Session is complete")
    if session.awaiting_reply:
        raise InvalidTurnError("Opponent reply is still pending")
    if not session.is_user_turn:
        raise InvalidTurnError("It is not the user's turn")
    if session.remaining_seconds <= 0:
        raise InvalidTurnError("Time for this stage has run out")
    content = (text or "").strip()
    if not content:
        raise InvalidTurnError("Submission must not be empty")

    stage = session.current_stage
    message = Message(
        speaker_role=Role.USER,
        content=content,
        stage_name=stage.name,
        elapsed_seconds=stage.allocated_duration_seconds - session.remaining_seconds,
    )
    return session.evolve(
        transcript=session.transcript + (message,),
        timer_running=False,
        awaiting_reply=True,
    )


def resolve_opponent_reply(
    session: Session,
    content: str,
    fallacies: tuple[str, ...] = (),
    coaching: Optional[str] = None,
) -> Session:
    """Append the opponent's reply and move to the next stage"""
    if not session.awaiting_reply:
        raise InvalidTurnError("No user turn is waiting for a reply")

    message = Message(
        speaker_role=Role.OPPONENT,
        content=content,
        stage_name=session.current_stage.name,
        fallacies=fallacies,
        coaching=coaching,
    )
    return _advance(session.evolve(transcript=session.transcript + (message,)))


async def fetch_opponent_reply(
    session: Session,
    source: Optional[CounterArgumentSource],
    selector: Selector,
    timeout: float = LLM_TIMEOUT_SECONDS,
) -> tuple[str, tuple[str, ...], str]:
    """Get reply text for the pending user turn, falling back to canned text

    Returns:
        (content, fallacies, coaching)
    """
    prior_argument = session.transcript[-1].content
    opponent_side = session.user_side.opposite
    content = None

    if source is not None:
        try:
            content = await asyncio.wait_for(
                source.generate_counter_argument(
                    session.topic,
                    prior_argument,
                    opponent_side,
                    stage_name=session.current_stage.name,
                    persona=pick_persona(selector),
                ),
                timeout=timeout,
            )
        except LLMError as e:
            logger.warning(str({
                "event": "inference_failed",
                "session_id": session.session_id,
                "kind": e.kind.value,
                "error": str(e),
            }))
        except asyncio.TimeoutError:
            logger.warning(str({
                "event": "inference_timeout",
                "session_id": session.session_id,
                "timeout": timeout,
            }))
        except Exception:
            # Any other failure still has to settle the turn.
            logger.exception(str({
                "event": "inference_error",
                "session_id": session.session_id,
            }))

    if not isinstance(content, str) or not content.strip():
        content = fallback_reply(opponent_side, selector)

    return content.strip(), maybe_inject_fallacy(selector), coaching_tip(selector)


async def submit_user_turn(
    session: Session,
    text: str,
    source: Optional[CounterArgumentSource],
    selector: Optional[Selector] = None,
    timeout: float = LLM_TIMEOUT_SECONDS,
) -> Session:
    """Submit the user's turn, obtain the opponent reply, and advance

    The new stage's timer is left paused.

    Raises:
        InvalidTurnError: If the submission is not valid right now
    """
    pending = begin_user_turn(session, text)
    content, fallacies, coaching = await fetch_opponent_reply(
        pending, source, selector or Selector(), timeout
    )
    return resolve_opponent_reply(pending, content, fallacies, coaching)
