"""Message handlers used by the game client."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from peril.gamedata import ArmyMove, RecognitionOfWar
from peril.gamestate import GameState, MoveOutcome
from peril.pubsub import AckType, PubSubError, publish_json
from peril.routing import EXCHANGE_PERIL_TOPIC, WAR_RECOGNITIONS_PREFIX, PlayingState


@contextmanager
def _prompt_after() -> Iterator[None]:
    """Redraw the input prompt once the wrapped block finishes."""
    try:
        yield
    finally:
        sys.stdout.write("> ")
        sys.stdout.flush()


def handler_move(
    game_state: GameState, publish_channel: Any
) -> Callable[[ArmyMove], AckType]:
    """Build a handler that reacts to other players' moves."""

    def handle(move: ArmyMove) -> AckType:
        with _prompt_after():
            outcome = game_state.handle_move(move)
            if outcome in (MoveOutcome.SAME_PLAYER, MoveOutcome.SAFE):
                return AckType.ACK
            if outcome is MoveOutcome.MAKE_WAR:
                try:
                    publish_json(
                        publish_channel,
                        EXCHANGE_PERIL_TOPIC,
                        f"{WAR_RECOGNITIONS_PREFIX}.{game_state.username}",
                        RecognitionOfWar(
                            attacker=move.player,
                            defender=game_state.player_snapshot(),
                        ),
                    )
                except PubSubError as err:
                    print(f"error: {err}")
                    return AckType.NACK_REQUEUE
                return AckType.ACK
            print("error: unknown move outcome")
            return AckType.NACK_DISCARD

    return handle


def handler_pause(game_state: GameState) -> Callable[[PlayingState], AckType]:
    """Build a handler that pauses or resumes the game."""

    def handle(state: PlayingState) -> AckType:
        with _prompt_after():
            game_state.handle_pause(state)
            return AckType.ACK

    return handle