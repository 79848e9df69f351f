"""Units, players and the messages exchanged between players."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

LOCATIONS = frozenset(
    {"americas", "europe", "africa", "asia", "australia", "antarctica"}
)


class UnitRank(str, Enum):
    """The kinds of unit a player can spawn."""

    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"

    def __str__(self) -> str:
        return self.value


_RANK_NAMES = frozenset(rank.value for rank in UnitRank)


def is_valid_location(name: str) -> bool:
    """Return True if name is one of the board's locations."""
    return name in LOCATIONS


def is_valid_rank(name: str) -> bool:
    """Return True if name is a unit rank."""
    return name in _RANK_NAMES


@dataclass(frozen=True)
class Unit:
    id: int
    rank: UnitRank
    location: str

    def to_dict(self) -> dict[str, Any]:
        return {"ID": self.id, "Rank": self.rank.value, "Location": self.location}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Unit":
        return cls(
            id=int(data.get("ID", 0)),
            rank=UnitRank(data.get("Rank")),
            location=str(data.get("Location", "")),
        )


@dataclass
class Player:
    username: str
    units: dict[int, Unit] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Username": self.username,
            "Units": {str(key): unit.to_dict() for key, unit in self.units.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Player":
        units = data.get("Units") or {}
        return cls(
            username=str(data.get("Username", "")),
            units={int(key): Unit.from_dict(value) for key, value in units.items()},
        )


@dataclass
class ArmyMove:
    player: Player
    units: list[Unit]
    to_location: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "Player": self.player.to_dict(),
            "Units": [unit.to_dict() for unit in self.units],
            "ToLocation": self.to_location,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArmyMove":
        return cls(
            player=Player.from_dict(data.get("Player") or {}),
            units=[Unit.from_dict(unit) for unit in data.get("Units") or []],
            to_location=str(data.get("ToLocation", "")),
        )


@dataclass
class RecognitionOfWar:
    attacker: Player
    defender: Player

    def to_dict(self) -> dict[str, Any]:
        return {
            "Attacker": self.attacker.to_dict(),
            "Defender": self.defender.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecognitionOfWar":
        return cls(
            attacker=Player.from_dict(data.get("Attacker") or {}),
            defender=Player.from_dict(data.get("Defender") or {}),
        )