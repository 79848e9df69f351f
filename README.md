# peril

Peril is a multiplayer war game in which players spawn armies on the
continents, move them around and go to war when their units meet. Players
talk to each other through a RabbitMQ broker. This package holds the game
rules, each player's state, and the helpers that publish and consume game
messages.

## What is inside

- `peril.gamedata`: `Unit`, `UnitRank`, `Player`, `ArmyMove` and
  `RecognitionOfWar`, each with `to_dict` and `from_dict` for the wire, plus
  `is_valid_location` and `is_valid_rank`.
- `peril.gamestate`: `GameState`, one player's view of the game, with
  `command_spawn`, `command_move` and `command_status`, and the handlers
  `handle_move`, `handle_war` and `handle_pause` for messages from other
  players. Rule violations raise `GameError`. Also `overlapping_location`
  and `units_to_power_level`.
- `peril.routing`: exchange names and routing keys (`EXCHANGE_PERIL_DIRECT`,
  `EXCHANGE_PERIL_TOPIC`, `ARMY_MOVES_PREFIX`, `WAR_RECOGNITIONS_PREFIX`,
  `PAUSE_KEY`, `GAME_LOG_SLUG`) and the `PlayingState` and `GameLog`
  messages.
- `peril.console`: help text, the `> ` prompt (`get_input`), the welcome
  sequence (`client_welcome`), `get_malicious_log` and `print_quit`. The
  printing functions also return the text they printed.
- `peril.logs`: `write_log` appends a `GameLog` to a file (`game.log` by
  default) after a deliberate delay (one second by default).
- `peril.pubsub`: `declare_and_bind`, `publish_json`, `publish_gob` (a
  compact msgpack encoding), and `subscribe_json` / `subscribe_gob`, which
  attach a handler that acks or nacks each delivery. Broker failures raise
  `PubSubError`.
- `peril.handlers`: `handler_move` and `handler_pause`, ready-made client
  handlers built around a `GameState`.

## Playing a round in code

```python
from peril.gamestate import GameState, GameError

state = GameState("alice")
state.command_spawn(["spawn", "europe", "infantry"])
state.command_spawn(["spawn", "europe", "cavalry"])

move = state.command_move(["move", "asia", "1"])
state.command_status()

try:
    state.command_move(["move", "atlantis", "1"])
except GameError as err:
    print(err)
```

Valid locations are americas, europe, africa, asia, australia and
antarctica. Units are infantry (power 1), cavalry (power 5) and artillery
(power 10). In a war the side with more power in the contested location
wins and the loser's units there are removed; on a draw the player's units
there are removed as well. `handle_war` returns a `WarResult` holding the
`WarOutcome` and, where there is one, the winner and loser.

## Messaging

`peril.pubsub` works on top of a `pika` connection and channel:

```python
import pika

from peril.pubsub import publish_json
from peril.routing import EXCHANGE_PERIL_DIRECT, PAUSE_KEY, PlayingState

connection = pika.BlockingConnection(pika.ConnectionParameters("localhost"))
channel = connection.channel()
publish_json(channel, EXCHANGE_PERIL_DIRECT, PAUSE_KEY, PlayingState(is_paused=True))
```

Values with a `to_dict` method are sent as that dictionary. Queues are
declared durable or transient according to `SimpleQueueType`, with the
dead-letter exchange `peril_dlx`, and consumers take at most 10 unacknowledged
messages at a time. Handlers passed to `subscribe_json` or `subscribe_gob`
receive the parsed data (or whatever the optional `decode` function makes of
it, e.g. `PlayingState.from_dict`) and return an `AckType`: acknowledge the
message, discard it, or put it back on the queue. The subscribe functions
return the consuming channel; start consuming on it yourself.

## What this package does not do

There is no runnable client or server and no command to start one: the
package provides the pieces, and the input loop and connection setup are
left to the caller. `peril.handlers` has no ready-made handler for
declarations of war or game logs; use `GameState.handle_war` and
`peril.logs.write_log` directly.

## Tests

The test suite uses pytest and lives in `tests/`; the `test` extra pulls in
what it needs.