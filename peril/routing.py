"""Exchange names, routing keys and the control messages sent over them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

ARMY_MOVES_PREFIX = "army_moves"
WAR_RECOGNITIONS_PREFIX = "war"
PAUSE_KEY = "pause"
GAME_LOG_SLUG = "game_logs"

EXCHANGE_PERIL_DIRECT = "peril_direct"
EXCHANGE_PERIL_TOPIC = "peril_topic"

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_FRACTION = re.compile(r"\.(\d+)")


def _format_time(moment: datetime) -> str:
    text = moment.isoformat()
    if moment.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def _parse_time(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # Sub-microsecond digits are dropped; fromisoformat wants 3 or 6 of them.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class PlayingState:
    """Whether the server has paused the game."""

    is_paused: bool

    def to_dict(self) -> dict[str, Any]:
        return {"IsPaused": self.is_paused}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlayingState":
        value = data.get("IsPaused", False)
        if not isinstance(value, bool):
            raise ValueError(f"IsPaused must be a boolean, not {value!r}")
        return cls(is_paused=value)


@dataclass(frozen=True)
class GameLog:
    """A line for the server's game log."""

    current_time: datetime
    message: str
    username: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "CurrentTime": _format_time(self.current_time),
            "Message": self.message,
            "Username": self.username,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameLog":
        raw_time = data.get("CurrentTime")
        if raw_time is None:
            current_time = _ZERO_TIME
        elif isinstance(raw_time, datetime):
            current_time = raw_time
        elif isinstance(raw_time, str):
            current_time = _parse_time(raw_time)
        else:
            raise ValueError(f"CurrentTime must be a timestamp, not {raw_time!r}")
        return cls(
            current_time=current_time,
            message=str(data.get("Message", "")),
            username=str(data.get("Username", "")),
        )