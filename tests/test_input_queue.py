import pytest

from binbreak.input_queue import EventMerger, InputQueue
from binbreak.models import Abort, Confirm, Digit, GameMode, Tick


@pytest.fixture()
def session(make_engine, clock):
    return make_engine([11]).start(GameMode(4), clock())


def test_queue_is_fifo():
    iq = InputQueue()
    iq.push(Digit("1"))
    iq.push(Confirm())
    assert len(iq) == 2
    assert iq.pop() == Digit("1")
    assert iq.pop_all() == [Confirm()]
    assert iq.pop() is None


def test_idle_merger_ticks_on_interval(clock, session):
    merger = EventMerger(InputQueue(), clock, tick_interval=0.1)
    assert merger.next_event(session) is None
    clock.advance(0.1)
    assert merger.next_event(session) == Tick()
    assert merger.next_event(session) is None


def test_input_beats_the_periodic_tick(clock, session):
    iq = InputQueue()
    merger = EventMerger(iq, clock, tick_interval=0.1)
    iq.push(Digit("3"))
    clock.advance(0.5)
    assert merger.next_event(session) == Digit("3")
    assert merger.next_event(session) == Tick()


def test_elapsed_deadline_beats_queued_input(clock, session):
    iq = InputQueue()
    merger = EventMerger(iq, clock)
    iq.push(Digit("1"))
    iq.push(Confirm())
    clock.t = session.current.deadline + 0.001
    assert merger.next_event(session) == Tick()
    assert len(iq) == 2


def test_input_at_exact_deadline_is_not_preempted(clock, session):
    iq = InputQueue()
    merger = EventMerger(iq, clock)
    iq.push(Confirm())
    clock.t = session.current.deadline
    assert merger.next_event(session) == Confirm()


def test_abort_beats_everything_and_drops_the_queue(clock, session):
    iq = InputQueue()
    merger = EventMerger(iq, clock)
    iq.push(Digit("1"))
    iq.push(Abort())
    iq.push(Confirm())
    clock.t = session.current.deadline + 5
    assert merger.next_event(session) == Abort()
    assert len(iq) == 0


def test_tick_interval_must_be_positive(clock):
    with pytest.raises(ValueError):
        EventMerger(InputQueue(), clock, tick_interval=0)


def test_explicit_now_overrides_the_clock(clock, session):
    iq = InputQueue()
    merger = EventMerger(iq, clock)
    iq.push(Confirm())
    late = session.current.deadline + 1.0
    assert merger.next_event(session, late) == Tick()
    assert merger.next_event(session, session.current.deadline) == Confirm()
