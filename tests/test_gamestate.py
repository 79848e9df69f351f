import pytest

from peril.gamedata import ArmyMove, Player, RecognitionOfWar, Unit, UnitRank
from peril.gamestate import (
    GameError,
    GameState,
    MoveOutcome,
    WarOutcome,
    overlapping_location,
    units_to_power_level,
)
from peril.routing import PlayingState


def _player(name, *units):
    return Player(name, {unit.id: unit for unit in units})


def _state_with(name, *spawns):
    state = GameState(name)
    for location, rank in spawns:
        state.command_spawn(["spawn", location, rank])
    return state


def test_new_state_is_not_paused_and_empty():
    state = GameState("alice")
    assert state.is_paused() is False
    assert state.username == "alice"
    assert state.player_snapshot().units == {}


def test_pause_and_resume():
    state = GameState("alice")
    state.pause_game()
    assert state.is_paused() is True
    state.resume_game()
    assert state.is_paused() is False


def test_handle_pause_follows_playing_state():
    state = GameState("alice")
    state.handle_pause(PlayingState(is_paused=True))
    assert state.is_paused() is True
    state.handle_pause(PlayingState(is_paused=False))
    assert state.is_paused() is False


def test_spawn_adds_unit_with_next_id():
    state = _state_with("alice", ("asia", "infantry"))
    unit = state.command_spawn(["spawn", "europe", "cavalry"])
    assert unit.id == len(state.player_snapshot().units)
    assert state.get_unit(unit.id) == unit
    assert unit.rank is UnitRank.CAVALRY
    assert unit.location == "europe"


@pytest.mark.parametrize(
    "words, message",
    [
        (["spawn", "asia"], "usage: spawn <location> <rank>"),
        (["spawn", "mars", "infantry"], "error: mars is not a valid location"),
        (["spawn", "asia", "general"], "error: general is not a valid unit"),
    ],
)
def test_spawn_errors(words, message):
    state = GameState("alice")
    with pytest.raises(GameError) as info:
        state.command_spawn(words)
    assert str(info.value) == message
    assert state.player_snapshot().units == {}


def test_move_updates_units_and_returns_move():
    state = _state_with("alice", ("asia", "infantry"), ("africa", "cavalry"))
    move = state.command_move(["move", "europe", "1", "2"])
    assert move.to_location == "europe"
    assert [unit.id for unit in move.units] == [1, 2]
    assert all(u.location == "europe" for u in state.player_snapshot().units.values())
    assert move.player == state.player_snapshot()


@pytest.mark.parametrize(
    "words, message",
    [
        (["move", "asia"], "usage: move <location> <unitID> <unitID> <unitID> etc"),
        (["move", "mars", "1"], "error: mars is not a valid location"),
        (["move", "asia", "abc"], "error: abc is not a valid unit ID"),
        (["move", "asia", "9"], "error: unit with ID 9 not found"),
    ],
)
def test_move_errors(words, message):
    state = _state_with("alice", ("europe", "infantry"))
    with pytest.raises(GameError) as info:
        state.command_move(words)
    assert str(info.value) == message


def test_move_refused_while_paused():
    state = _state_with("alice", ("europe", "infantry"))
    state.pause_game()
    with pytest.raises(GameError, match="the game is paused"):
        state.command_move(["move", "asia", "1"])
    assert state.get_unit(1).location == "europe"


def test_snapshot_is_independent_copy():
    state = _state_with("alice", ("asia", "infantry"))
    snapshot = state.player_snapshot()
    snapshot.units.clear()
    assert state.get_unit(1) is not None
    assert len(state.player_snapshot().units) == 1


def test_remove_units_in_location():
    state = _state_with("alice", ("asia", "infantry"), ("europe", "cavalry"))
    state.remove_units_in_location("asia")
    locations = {u.location for u in state.player_snapshot().units.values()}
    assert locations == {"europe"}


def test_overlapping_location():
    first = _player("a", Unit(1, UnitRank.INFANTRY, "asia"))
    second = _player("b", Unit(1, UnitRank.CAVALRY, "europe"), Unit(2, UnitRank.CAVALRY, "asia"))
    assert overlapping_location(first, second) == "asia"
    assert overlapping_location(first, _player("c")) is None


def test_power_levels():
    artillery = [Unit(1, UnitRank.ARTILLERY, "asia")]
    cavalry = [Unit(2, UnitRank.CAVALRY, "asia")]
    infantry = [Unit(3, UnitRank.INFANTRY, "asia")]
    assert units_to_power_level(artillery) == 10
    assert units_to_power_level([]) == 0
    assert (
        units_to_power_level(artillery)
        > units_to_power_level(cavalry)
        > units_to_power_level(infantry)
    )
    assert units_to_power_level(artillery + cavalry + infantry) == sum(
        units_to_power_level(group) for group in (artillery, cavalry, infantry)
    )


def test_handle_move_same_player():
    state = _state_with("alice", ("asia", "infantry"))
    move = ArmyMove(state.player_snapshot(), [], "asia")
    assert state.handle_move(move) is MoveOutcome.SAME_PLAYER


def test_handle_move_safe_and_war():
    state = _state_with("alice", ("asia", "infantry"))
    far = _player("bob", Unit(1, UnitRank.CAVALRY, "europe"))
    near = _player("bob", Unit(1, UnitRank.CAVALRY, "asia"))
    assert state.handle_move(ArmyMove(far, list(far.units.values()), "europe")) is MoveOutcome.SAFE
    assert state.handle_move(ArmyMove(near, list(near.units.values()), "asia")) is MoveOutcome.MAKE_WAR


def test_war_published_by_self_is_not_involved():
    state = _state_with("bob", ("asia", "infantry"))
    war = RecognitionOfWar(_player("alice"), state.player_snapshot())
    assert state.handle_war(war).outcome is WarOutcome.NOT_INVOLVED


def test_war_between_others_is_not_involved():
    state = GameState("carol")
    war = RecognitionOfWar(_player("alice"), _player("bob"))
    result = state.handle_war(war)
    assert result.outcome is WarOutcome.NOT_INVOLVED
    assert result.winner is None


def test_war_without_shared_location():
    state = _state_with("alice", ("asia", "infantry"))
    defender = _player("bob", Unit(1, UnitRank.INFANTRY, "europe"))
    result = state.handle_war(RecognitionOfWar(state.player_snapshot(), defender))
    assert result.outcome is WarOutcome.NO_UNITS


def test_attacker_wins():
    state = _state_with("alice", ("asia", "artillery"))
    defender = _player("bob", Unit(1, UnitRank.INFANTRY, "asia"))
    result = state.handle_war(RecognitionOfWar(state.player_snapshot(), defender))
    assert result.outcome is WarOutcome.YOU_WON
    assert (result.winner, result.loser) == ("alice", "bob")
    assert state.get_unit(1) is not None


def test_attacker_loses_units():
    state = _state_with("alice", ("asia", "infantry"), ("europe", "cavalry"))
    defender = _player("bob", Unit(1, UnitRank.ARTILLERY, "asia"))
    result = state.handle_war(RecognitionOfWar(state.player_snapshot(), defender))
    assert result.outcome is WarOutcome.OPPONENT_WON
    assert (result.winner, result.loser) == ("bob", "alice")
    remaining = {u.location for u in state.player_snapshot().units.values()}
    assert remaining == {"europe"}


def test_draw_removes_units():
    state = _state_with("alice", ("asia", "infantry"))
    defender = _player("bob", Unit(1, UnitRank.INFANTRY, "asia"))
    result = state.handle_war(RecognitionOfWar(state.player_snapshot(), defender))
    assert result.outcome is WarOutcome.DRAW
    assert (result.winner, result.loser) == ("alice", "bob")
    assert state.player_snapshot().units == {}


def test_status_when_paused(capsys):
    state = _state_with("alice", ("asia", "infantry"))
    state.pause_game()
    state.command_status()
    assert capsys.readouterr().out == "The game is paused.\n"


def test_status_lists_units(capsys):
    state = _state_with("alice", ("asia", "infantry"))
    capsys.readouterr()
    state.command_status()
    out = capsys.readouterr().out
    assert "The game is not paused." in out
    assert "* 1: asia, infantry" in out