# actorkit

actorkit is a small actor framework built on `asyncio`. Each actor runs in its own task and
holds state that only it can touch. It reacts to the messages sent to it. Actors can be linked
into supervision trees, and a supervisor is told when one of its children starts, stops or
fails.

## Features

- **Four ports per actor.** An actor listens on four ports and reads them in a fixed order:
  signal, stop, supervision, message. A kill signal (`kill()`) cancels the work that is in
  progress. A stop request (`stop(reason)`) takes effect once the current message has been
  handled. Because stop is read before messages, any messages still queued when a stop arrives
  are dropped.
- **Lifecycle hooks** on `actorkit.actor.Actor`: `pre_start`, `post_start`, `handle`,
  `handle_supervisor_evt` and `post_stop`.
  - A hook that returns a value other than `None` replaces the actor's state.
  - If a subclass sets `message_type`, the actor only accepts messages of that type. A message
    of any other type raises `InvalidActorType`.
- **Supervision.**
  - An exception raised in `pre_start` makes the spawn fail with `StartupPanic`.
  - An exception raised in any other hook ends the actor. It is reported to the supervisor as
    an `ActorPanicked` event.
  - A clean exit is reported as `ActorTerminated`. The event carries the actor's last state in
    a `BoxedState`, which you read with `take(expected_type)`.
- **Spawning.**
  - `Actor.spawn` and `Actor.spawn_linked` wait for `pre_start` to finish.
  - `ActorRuntime.spawn_instant` and `ActorRuntime.spawn_linked_instant` return at once. They
    also return a task that resolves to the actor's completion task.
  - A spawn given a name that is already in use raises `ActorAlreadyRegistered`.
- **Actor references.** Each `ActorRef` exposes:
  - `id`, an `ActorId`, printed as `0.<pid>` for local actors
  - `name`
  - `status`, an `ActorStatus`
  - `send_message`, `stop` and `kill`
  - `num_children()` and `num_parents()`
- **Errors** live in `actorkit.errors`:
  - `SpawnError` and its subclasses
  - `ActorError`
  - `MessagingError`, with `ChannelClosed` and `InvalidActorType`
  - `BoxedDowncastError`

## Installation

```
pip install .
```

To also install the test dependencies, add the `test` extra:

```
pip install ".[test]"
```

## Example

```python
import asyncio

from actorkit.actor import Actor


class Counter(Actor):
    message_type = int

    async def pre_start(self, myself, args):
        return 0

    async def handle(self, myself, message, state):
        return state + message

    async def post_stop(self, myself, state):
        print("Count is:", state)


async def run():
    actor, handle = await Counter().spawn(None, None)
    for amount in (5, 10, -5):
        actor.send_message(amount)
    await asyncio.sleep(0.01)  # let the messages be handled before stopping
    actor.stop(None)
    await handle


asyncio.run(run())
```

## Supervision

Use `spawn_linked` to link a child to a supervisor. You can pass the supervisor as an `ActorRef`
or as an `ActorCell`:

```python
child, child_handle = await Child().spawn_linked(None, None, supervisor)
```

By default, a supervisor stops itself as soon as any of its children terminates or panics. To
change this, override `handle_supervisor_evt` and check the type of the event. The event types
are in `actorkit.messages`: `ActorStarted`, `ActorTerminated` and `ActorPanicked`.

When an actor ends, it does the following:

- terminates its own children
- notifies its supervisor
- releases its name
- unlinks itself

## Bundled demos

```
actorkit-ping-pong
```

This runs an actor that sends itself alternating ping and pong messages ten times, printing
`ping..pong..`, and then stops.

```
actorkit-monte-carlo [--games N]
```

This runs a Monte Carlo simulation of a dice game, with 100 games by default. A `GameManager`
supervises one `Game` actor per game. At the end it prints how many simulations ran and the
average funds left. To run the simulation from code and get a `SimulationReport`, call
`await actorkit.monte_carlo.run_simulation(num_games)`.

## What it does not do

actorkit runs actors inside a single process. It has:

- no request/reply (RPC) helper for waiting on an answer from an actor
- no lookup of actors by name from outside
- no delayed or scheduled message sending
- no process groups
- no remote actors or networking between nodes

`ActorId` can represent a remote id, but nothing in the package spawns or talks to remote
actors.