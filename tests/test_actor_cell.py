import asyncio

import pytest

from actorkit.actor_cell import (
    ACTIVE_STATES,
    ActorCell,
    ActorPortMessage,
    ActorRef,
    ActorStatus,
    SignalInterrupt,
)
from actorkit.errors import ActorAlreadyRegistered, ChannelClosed, InvalidActorType
from actorkit.messages import ActorStarted, Signal, StopMessage


def test_status_values_follow_lifecycle_order():
    cell, _ = ActorCell.create()
    seen = []
    for status in ActorStatus:
        cell.set_status(status)
        seen.append(cell.status.value)
    assert seen == [0, 1, 2, 3, 4, 5]
    assert ACTIVE_STATES == (
        ActorStatus.STARTING,
        ActorStatus.RUNNING,
        ActorStatus.UPGRADING,
    )


def test_new_cell_is_unstarted_and_local():
    cell, _ = ActorCell.create()
    assert cell.status == ActorStatus.UNSTARTED
    assert cell.id.is_local()
    assert cell.name is None


def test_ids_are_unique():
    a, _ = ActorCell.create()
    b, _ = ActorCell.create()
    assert a.id.pid != b.id.pid
    assert a != b


def test_repr_with_and_without_name():
    named, _ = ActorCell.create("repr-named")
    anonymous, _ = ActorCell.create()
    assert repr(named) == f"Actor 'repr-named' (id: {named.id})"
    assert repr(anonymous) == f"Actor with id: {anonymous.id}"


def test_duplicate_name_rejected_until_stopped():
    cell, _ = ActorCell.create("dup-name")
    with pytest.raises(ActorAlreadyRegistered) as info:
        ActorCell.create("dup-name")
    assert info.value.name == "dup-name"
    cell.set_status(ActorStatus.STOPPED)
    again, _ = ActorCell.create("dup-name")
    assert again.name == "dup-name"
    assert cell.status == ActorStatus.STOPPED


def test_wrong_message_type_rejected():
    cell, _ = ActorCell.create(message_type=str)
    with pytest.raises(InvalidActorType):
        cell.send_message(42)


@pytest.mark.asyncio
async def test_listen_in_priority_order():
    cell, ports = ActorCell.create(message_type=str)
    cell.send_message("hello")
    cell.send_supervisor_evt(ActorStarted(cell))
    cell.stop("done")
    cell.kill()

    kinds = []
    payloads = []
    for _ in range(4):
        kind, payload = await ports.listen_in_priority()
        kinds.append(kind)
        payloads.append(payload)

    assert kinds == [
        ActorPortMessage.SIGNAL,
        ActorPortMessage.STOP,
        ActorPortMessage.SUPERVISION,
        ActorPortMessage.MESSAGE,
    ]
    assert payloads[0] is Signal.KILL
    assert payloads[1] == StopMessage("done")
    assert payloads[2].actor is cell
    assert payloads[3] == "hello"


@pytest.mark.asyncio
async def test_listen_wakes_on_later_message():
    cell, ports = ActorCell.create()
    listener = asyncio.ensure_future(ports.listen_in_priority())
    await asyncio.sleep(0.01)
    assert not listener.done()
    cell.send_message("late")
    kind, payload = await asyncio.wait_for(listener, 1)
    assert (kind, payload) == (ActorPortMessage.MESSAGE, "late")


@pytest.mark.asyncio
async def test_stop_port_is_bounded_and_overflow_is_dropped():
    cell, ports = ActorCell.create()
    cell.stop()
    cell.stop("second")
    cell.stop("third")
    first = await ports.listen_in_priority()
    second = await ports.listen_in_priority()
    assert first == (ActorPortMessage.STOP, StopMessage())
    assert second == (ActorPortMessage.STOP, StopMessage("second"))
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(ports.listen_in_priority(), 0.05)


@pytest.mark.asyncio
async def test_closed_ports_refuse_sends_and_listening():
    cell, ports = ActorCell.create()
    cell.send_message("queued")
    ports.close()
    with pytest.raises(ChannelClosed):
        cell.send_message("after close")
    with pytest.raises(ChannelClosed):
        cell.send_supervisor_evt(ActorStarted(cell))
    with pytest.raises(ChannelClosed):
        await ports.listen_in_priority()


@pytest.mark.asyncio
async def test_run_with_signal_returns_result():
    _, ports = ActorCell.create()

    async def work():
        await asyncio.sleep(0.01)
        return "finished"

    assert await ports.run_with_signal(work()) == "finished"


@pytest.mark.asyncio
async def test_run_with_signal_interrupted_by_kill():
    cell, ports = ActorCell.create()
    reached_end = []

    async def work():
        await asyncio.sleep(10)
        reached_end.append(True)

    async def killer():
        await asyncio.sleep(0.01)
        cell.kill()

    asyncio.ensure_future(killer())
    with pytest.raises(SignalInterrupt) as info:
        await asyncio.wait_for(ports.run_with_signal(work()), 1)
    assert info.value.signal is Signal.KILL
    assert reached_end == []


@pytest.mark.asyncio
async def test_run_with_signal_propagates_errors():
    _, ports = ActorCell.create()

    async def failing():
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        await ports.run_with_signal(failing())


def test_link_and_unlink():
    parent, _ = ActorCell.create()
    child, _ = ActorCell.create()
    child.link(parent)
    assert parent.num_children() == 1
    assert child.num_parents() == 1

    stranger, _ = ActorCell.create()
    child.unlink(stranger)
    assert child.num_parents() == 1

    child.unlink(parent)
    assert parent.num_children() == 0
    assert child.num_parents() == 0


@pytest.mark.asyncio
async def test_terminate_kills_self_and_children():
    parent, parent_ports = ActorCell.create()
    child, child_ports = ActorCell.create()
    parent.set_status(ActorStatus.RUNNING)
    child.set_status(ActorStatus.RUNNING)
    child.link(parent)

    parent.terminate()

    assert parent.num_children() == 0
    assert child.num_parents() == 0
    assert await parent_ports.listen_in_priority() == (ActorPortMessage.SIGNAL, Signal.KILL)
    assert await child_ports.listen_in_priority() == (ActorPortMessage.SIGNAL, Signal.KILL)


@pytest.mark.asyncio
async def test_terminate_of_stopped_actor_sends_no_kill():
    cell, ports = ActorCell.create()
    cell.set_status(ActorStatus.STOPPED)
    cell.terminate()
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(ports.listen_in_priority(), 0.05)


@pytest.mark.asyncio
async def test_notify_supervisor_reaches_parent():
    parent, parent_ports = ActorCell.create()
    child, _ = ActorCell.create()
    child.link(parent)
    child.notify_supervisor(ActorStarted(child))
    kind, event = await parent_ports.listen_in_priority()
    assert kind is ActorPortMessage.SUPERVISION
    assert event.actor == child


def test_notify_without_supervisor_is_silent():
    cell, _ = ActorCell.create()
    cell.notify_supervisor(ActorStarted(cell))
    assert cell.num_parents() == 0


@pytest.mark.asyncio
async def test_actor_ref_delegates_to_cell():
    cell, ports = ActorCell.create("ref-delegate", message_type=int)
    ref = ActorRef(cell)
    assert ref.cell is cell
    assert ref.id == cell.id
    assert ref.name == "ref-delegate"
    assert repr(ref) == repr(cell)
    assert ref == cell
    assert hash(ref) == hash(cell)
    ref.send_message(7)
    assert await ports.listen_in_priority() == (ActorPortMessage.MESSAGE, 7)
    with pytest.raises(InvalidActorType):
        ref.send_message("not an int")