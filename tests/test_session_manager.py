from session_manager import SessionTracker


def test_greet_once_per_day(calendar):
    st = SessionTracker(today=calendar)
    assert st.should_greet("u1") is True
    assert st.should_greet("u1") is False
    assert st.should_greet("u2") is True

    calendar.advance(1)
    assert st.should_greet("u1") is True
    assert st.last_greeted("u1") == calendar.day


def test_prune_when_over_cap(calendar):
    st = SessionTracker(max_entries=2, retention_days=30, today=calendar)
    st.should_greet("old")
    calendar.advance(40)
    st.should_greet("a")
    assert len(st) == 2
    st.should_greet("b")  # over the cap: "old" is past retention
    assert len(st) == 2
    assert st.last_greeted("old") is None


def test_prune_keeps_recent_entries_even_over_cap(calendar):
    st = SessionTracker(max_entries=1, retention_days=30, today=calendar)
    st.should_greet("a")
    calendar.advance(5)
    st.should_greet("b")
    assert len(st) == 2
