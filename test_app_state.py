from app_state import Focus, Session


class FakeHandle:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeRunner:
    def __init__(self, busy=0):
        self.busy = busy

    def in_flight(self):
        return self.busy


def test_open_bumps_session_id():
    session = Session()
    first = session.open(FakeHandle(), "a.db")
    assert session.is_open
    assert session.focus is Focus.TABLES
    second = session.open(FakeHandle(), "b.db")
    assert second > first


def test_release_defers_close_until_idle():
    session = Session()
    handle = FakeHandle()
    session.open(handle, "a.db")
    opened_id = session.session_id
    session.release()
    assert not session.is_open
    assert session.session_id != opened_id

    runner = FakeRunner(busy=1)
    assert session.reap(runner) == 0
    assert not handle.closed
    runner.busy = 0
    assert session.reap(runner) == 1
    assert handle.closed


def test_close_all_closes_everything():
    session = Session()
    a, b = FakeHandle(), FakeHandle()
    session.open(a)
    session.open(b)
    session.close_all()
    assert a.closed and b.closed
    assert not session.is_open
