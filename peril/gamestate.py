"""A player's view of the game and the rules for moves, spawns and wars."""

from __future__ import annotations

import re
import threading
from dataclasses import replace
from enum import Enum, auto
from typing import Iterable, NamedTuple

from peril.gamedata import (
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
    is_valid_location,
    is_valid_rank,
)
from peril.routing import PlayingState

_SEPARATOR = "------------------------"
_UNIT_ID = re.compile(r"[+-]?[0-9]+")
_RANK_POWER = {
    UnitRank.ARTILLERY: 10,
    UnitRank.CAVALRY: 5,
    UnitRank.INFANTRY: 1,
}


class GameError(Exception):
    """A command that the game rules do not allow."""


class MoveOutcome(Enum):
    SAME_PLAYER = auto()
    SAFE = auto()
    MAKE_WAR = auto()


class WarOutcome(Enum):
    NOT_INVOLVED = auto()
    NO_UNITS = auto()
    YOU_WON = auto()
    OPPONENT_WON = auto()
    DRAW = auto()


class WarResult(NamedTuple):
    outcome: WarOutcome
    winner: str | None = None
    loser: str | None = None


def overlapping_location(first: Player, second: Player) -> str | None:
    """Return a location where both players have units, or None."""
    return next(
        (
            mine.location
            for mine in first.units.values()
            for theirs in second.units.values()
            if mine.location == theirs.location
        ),
        None,
    )


def units_to_power_level(units: Iterable[Unit]) -> int:
    """Sum the fighting power of the given units."""
    return sum(_RANK_POWER.get(unit.rank, 0) for unit in units)


class GameState:
    """The local player's units and whether the game is paused."""

    def __init__(self, username: str) -> None:
        self.player = Player(username)
        self.paused = False
        self._lock = threading.Lock()

    @property
    def username(self) -> str:
        return self.player.username

    def is_paused(self) -> bool:
        with self._lock:
            return self.paused

    def pause_game(self) -> None:
        with self._lock:
            self.paused = True

    def resume_game(self) -> None:
        with self._lock:
            self.paused = False

    def add_unit(self, unit: Unit) -> None:
        with self._lock:
            self.player.units[unit.id] = unit

    def update_unit(self, unit: Unit) -> None:
        with self._lock:
            self.player.units[unit.id] = unit

    def remove_units_in_location(self, location: str) -> None:
        with self._lock:
            self.player.units = {
                key: unit
                for key, unit in self.player.units.items()
                if unit.location != location
            }

    def get_unit(self, unit_id: int) -> Unit | None:
        with self._lock:
            return self.player.units.get(unit_id)

    def player_snapshot(self) -> Player:
        """Return a copy of the player that later changes do not touch."""
        with self._lock:
            return Player(self.player.username, dict(self.player.units))

    def handle_move(self, move: ArmyMove) -> MoveOutcome:
        player = self.player_snapshot()
        try:
            print()
            print("==== Move Detected ====")
            print(
                f"{move.player.username} is moving {len(move.units)} unit(s) "
                f"to {move.to_location}"
            )
            for unit in move.units:
                print(f"* {unit.rank}")

            if player.username == move.player.username:
                return MoveOutcome.SAME_PLAYER

            location = overlapping_location(player, move.player)
            if location:
                print(
                    f"You have units in {location}! "
                    f"You are at war with {move.player.username}!"
                )
                return MoveOutcome.MAKE_WAR
            print(f"You are safe from {move.player.username}'s units.")
            return MoveOutcome.SAFE
        finally:
            print(_SEPARATOR)

    def command_move(self, words: list[str]) -> ArmyMove:
        """Move units by id to a location: move <location> <unitID>..."""
        if self.is_paused():
            raise GameError("the game is paused, you can not move units")
        if len(words) < 3:
            raise GameError("usage: move <location> <unitID> <unitID> <unitID> etc")
        new_location = words[1]
        if not is_valid_location(new_location):
            raise GameError(f"error: {new_location} is not a valid location")

        unit_ids = []
        for word in words[2:]:
            if not _UNIT_ID.fullmatch(word):
                raise GameError(f"error: {word} is not a valid unit ID")
            unit_ids.append(int(word))

        moved = []
        for unit_id in unit_ids:
            unit = self.get_unit(unit_id)
            if unit is None:
                raise GameError(f"error: unit with ID {unit_id} not found")
            unit = replace(unit, location=new_location)
            self.update_unit(unit)
            moved.append(unit)

        move = ArmyMove(
            player=self.player_snapshot(), units=moved, to_location=new_location
        )
        print(f"Moved {len(move.units)} units to {move.to_location}")
        return move

    def handle_pause(self, state: PlayingState) -> None:
        try:
            print()
            if state.is_paused:
                print("==== Pause Detected ====")
                self.pause_game()
            else:
                print("==== Resume Detected ====")
                self.resume_game()
        finally:
            print(_SEPARATOR)

    def command_spawn(self, words: list[str]) -> Unit:
        """Create a unit: spawn <location> <rank>."""
        if len(words) < 3:
            raise GameError("usage: spawn <location> <rank>")
        location = words[1]
        if not is_valid_location(location):
            raise GameError(f"error: {location} is not a valid location")
        rank = words[2]
        if not is_valid_rank(rank):
            raise GameError(f"error: {rank} is not a valid unit")

        with self._lock:
            unit_id = len(self.player.units) + 1
        unit = Unit(id=unit_id, rank=UnitRank(rank), location=location)
        self.add_unit(unit)
        print(f"Spawned a(n) {rank} in {location} with id {unit_id}")
        return unit

    def handle_war(self, recognition: RecognitionOfWar) -> WarResult:
        attacker, defender = recognition.attacker, recognition.defender
        try:
            print()
            print("==== War Declared ====")
            print(f"{attacker.username} has declared war on {defender.username}!")

            player = self.player_snapshot()
            if player.username == defender.username:
                print(f"{player.username}, you published the war.")
                return WarResult(WarOutcome.NOT_INVOLVED)
            if player.username != attacker.username:
                print(f"{player.username}, you are not involved in this war.")
                return WarResult(WarOutcome.NOT_INVOLVED)

            location = overlapping_location(attacker, defender)
            if not location:
                print("Error! No units are in the same location. No war will be fought.")
                return WarResult(WarOutcome.NO_UNITS)

            attacker_units = [u for u in attacker.units.values() if u.location == location]
            defender_units = [u for u in defender.units.values() if u.location == location]

            print(f"{attacker.username}'s units:")
            for unit in attacker_units:
                print(f"  * {unit.rank}")
            print(f"{defender.username}'s units:")
            for unit in defender_units:
                print(f"  * {unit.rank}")

            attacker_power = units_to_power_level(attacker_units)
            defender_power = units_to_power_level(defender_units)
            print(f"Attacker has a power level of {attacker_power}")
            print(f"Defender has a power level of {defender_power}")

            if attacker_power > defender_power:
                print(f"{attacker.username} has won the war!")
                if player.username == defender.username:
                    self._lose_units(location)
                    return WarResult(
                        WarOutcome.OPPONENT_WON, attacker.username, defender.username
                    )
                return WarResult(WarOutcome.YOU_WON, attacker.username, defender.username)
            if defender_power > attacker_power:
                print(f"{defender.username} has won the war!")
                if player.username == attacker.username:
                    self._lose_units(location)
                    return WarResult(
                        WarOutcome.OPPONENT_WON, defender.username, attacker.username
                    )
                return WarResult(WarOutcome.YOU_WON, defender.username, attacker.username)

            print("The war ended in a draw!")
            print(f"Your units in {location} have been killed.")
            self.remove_units_in_location(location)
            return WarResult(WarOutcome.DRAW, attacker.username, defender.username)
        finally:
            print(_SEPARATOR)

    def _lose_units(self, location: str) -> None:
        print("You have lost the war!")
        self.remove_units_in_location(location)
        print(f"Your units in {location} have been killed.")

    def command_status(self) -> None:
        if self.is_paused():
            print("The game is paused.")
            return
        print("The game is not paused.")
        player = self.player_snapshot()
        print(f"You are {player.username}, and you have {len(player.units)} units.")
        for unit in player.units.values():
            print(f"* {unit.id}: {unit.location}, {unit.rank}")