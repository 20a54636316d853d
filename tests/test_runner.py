from binbreak.enums import Verdict
from binbreak.models import Abort, Confirm, Digit, GameMode, Tick
from binbreak.runner import SessionRunner

FOUR = GameMode(4)


class CountingStore:
    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    def best(self, mode):
        return self.inner.best(mode)

    def record_result(self, result):
        self.calls.append(result)
        return self.inner.record_result(result)


def make_runner(make_engine, store, clock, targets=(11,), lives=3):
    return SessionRunner(make_engine(targets, lives=lives), store, clock, tick_interval=0.1)


def type_guess(runner, text):
    for ch in text:
        runner.push(Digit(ch))
    runner.push(Confirm())


def test_pump_without_session_does_nothing(make_engine, store, clock):
    assert make_runner(make_engine, store, clock).pump() == []


def test_pump_applies_queued_input_in_order(make_engine, store, clock):
    runner = make_runner(make_engine, store, clock, targets=(11, 6))
    runner.start(FOUR)
    type_guess(runner, "11")
    changed = runner.pump()
    assert [s.entry for s in changed] == ["1", "11", ""]
    assert runner.state.verdict is Verdict.CORRECT
    assert runner.state.streak == 1


def test_timeout_ends_session_and_records_once(make_engine, store, clock):
    counting = CountingStore(store)
    runner = make_runner(make_engine, counting, clock, lives=1)
    runner.start(FOUR)
    clock.advance(8.01)
    runner.pump()
    assert runner.state.is_over
    assert runner.state.verdict is Verdict.TIMEOUT
    for _ in range(5):
        clock.advance(1.0)
        runner.push(Tick())
        runner.pump()
    assert len(counting.calls) == 1
    assert counting.calls[0].final_score == 0


def test_new_record_is_reported(make_engine, store, clock):
    runner = make_runner(make_engine, store, clock, targets=(11, 11, 2))
    runner.start(FOUR)
    type_guess(runner, "11")
    runner.push(Abort())
    runner.pump()
    # abort wins over the queued guess
    assert runner.state.is_over
    assert runner.state.score == 0
    assert runner.record is not None and not runner.record.is_new_record

    runner.start(FOUR)
    type_guess(runner, "11")
    runner.pump()
    runner.push(Abort())
    runner.pump()
    assert runner.state.result.final_score == 15
    assert runner.record.is_new_record
    assert store.best(FOUR) == 15


def test_write_failure_is_not_fatal(make_engine, store, backend, clock):
    backend.fail_writes = True
    runner = make_runner(make_engine, store, clock, targets=(11, 2))
    runner.start(FOUR)
    type_guess(runner, "11")
    runner.pump()
    runner.push(Abort())
    runner.pump()
    assert runner.state.result.final_score == 15
    assert runner.state.score == 15
    assert not runner.record.ok
    assert not runner.record.is_new_record
    assert store.best(FOUR) == 0

    # a later session still works
    backend.fail_writes = False
    runner.start(FOUR)
    assert runner.state.score == 0
    assert runner.previous_best == 0


def test_start_clears_leftover_input(make_engine, store, clock):
    runner = make_runner(make_engine, store, clock, targets=(11, 3))
    runner.push(Digit("9"))
    runner.start(FOUR)
    assert len(runner.iq) == 0


class SteppingClock:
    """Moves forward by ``step`` after every read."""

    def __init__(self, t: float = 100.0, step: float = 0.0) -> None:
        self.t = t
        self.step = step

    def __call__(self) -> float:
        value = self.t
        self.t += self.step
        return value


def test_input_picked_before_deadline_is_judged_at_the_same_instant(make_engine, store):
    clock = SteppingClock()
    runner = make_runner(make_engine, store, clock, targets=(11, 6))
    runner.start(FOUR)
    runner.push(Digit("1"))
    runner.push(Digit("1"))
    runner.pump()
    assert runner.state.entry == "11"

    runner.push(Confirm())
    clock.t = runner.state.current.deadline - 0.001
    clock.step = 0.002  # any second read would land past the deadline
    runner.pump()
    assert runner.state.verdict is Verdict.CORRECT
    assert runner.state.lives == 3
    assert runner.state.streak == 1
