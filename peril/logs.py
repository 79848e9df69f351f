"""Appending game log entries to disk."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timedelta
from typing import Union

from peril.routing import GameLog

LOGS_FILE = "game.log"
WRITE_TO_DISK_SLEEP = 1.0

_log = logging.getLogger(__name__)


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.isoformat(timespec="seconds")
    if moment.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def write_log(
    gamelog: GameLog,
    path: Union[str, os.PathLike] = LOGS_FILE,
    delay: float = WRITE_TO_DISK_SLEEP,
) -> None:
    """Append one entry to the log file after a deliberate delay."""
    _log.info("received game log...")
    time.sleep(delay)

    line = f"{_rfc3339(gamelog.current_time)} {gamelog.username}: {gamelog.message}\n"
    try:
        handle = open(path, "a", encoding="utf-8")
    except OSError as err:
        raise OSError(f"could not open logs file: {err}") from err
    with handle:
        try:
            handle.write(line)
        except OSError as err:
            raise OSError(f"could not write to logs file: {err}") from err