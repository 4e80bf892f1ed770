"""Tests for the in-memory session store."""

import threading

import pytest

from showrelay.server.models import (
    SessionExistsError,
    SessionNotFoundError,
    SessionStore,
    default_game_state,
)


def test_create_session_registers_host_with_defaults(store):
    session = store.create_session("ABCD", "host-sid")

    assert session.code == "ABCD"
    assert session.host_sid == "host-sid"
    assert session.players == []
    assert session.game_state == default_game_state()
    assert store.lookup_session("ABCD") is session
    assert "ABCD" in store


def test_create_session_with_taken_code_keeps_original(store):
    original = store.create_session("ABCD", "first")

    with pytest.raises(SessionExistsError) as exc_info:
        store.create_session("ABCD", "second")

    assert exc_info.value.code == "ABCD"
    assert store.lookup_session("ABCD") is original
    assert store.session_count() == 1


def test_lookup_unknown_code_raises(store):
    with pytest.raises(SessionNotFoundError):
        store.lookup_session("NOPE")


def test_codes_are_not_normalized(store):
    store.create_session("abcd", "host-sid")

    with pytest.raises(SessionNotFoundError):
        store.lookup_session("ABCD")


def test_delete_session_is_idempotent(store):
    store.create_session("ABCD", "host-sid")

    assert store.delete_session("ABCD") is not None
    assert store.delete_session("ABCD") is None
    assert "ABCD" not in store


def test_locked_yields_live_session(store):
    created = store.create_session("ABCD", "host-sid")

    with store.locked("ABCD") as session:
        assert session is created


def test_locked_unknown_code_raises(store):
    with pytest.raises(SessionNotFoundError):
        with store.locked("NOPE"):
            pass


def test_locked_does_not_hand_out_deleted_session(store):
    store.create_session("ABCD", "host-sid")
    store.delete_session("ABCD")

    with pytest.raises(SessionNotFoundError):
        with store.locked("ABCD"):
            pass


def test_default_game_state_is_fresh_per_session(store):
    first = store.create_session("ONE", "h1")
    second = store.create_session("TWO", "h2")

    first.game_state["completedQuestions"].append("q1")

    assert second.game_state["completedQuestions"] == []
    assert default_game_state()["completedQuestions"] == []


def test_default_game_state_covers_round_fields():
    state = default_game_state()

    assert state["score"] == 0
    assert state["view"] == "rounds"
    assert state["wallLives"] == 3
    assert state["wallPhase"] == "solving"
    assert state["vowelsCurrentCategory"] == 0
    assert state["vowelsAnswerRevealed"] is False


def test_counts_track_sessions_and_players(store):
    from showrelay.server.controllers import join_session

    session = store.create_session("ABCD", "host")
    store.create_session("EFGH", "host-2")
    with store.locked("ABCD"):
        join_session(session, "p1", "Alice")
        join_session(session, "p2", "Bob")

    assert store.session_count() == 2
    assert store.player_count() == 2


def test_concurrent_creates_yield_exactly_one_session():
    store = SessionStore()
    barrier = threading.Barrier(8)
    outcomes = []
    outcomes_lock = threading.Lock()

    def create(index):
        barrier.wait()
        try:
            store.create_session("RACE", f"host-{index}")
            result = "created"
        except SessionExistsError:
            result = "exists"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=create, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("created") == 1
    assert outcomes.count("exists") == 7
    assert store.session_count() == 1


def test_concurrent_joins_do_not_lose_players():
    from showrelay.server.controllers import join_session

    store = SessionStore()
    store.create_session("ABCD", "host")

    def join(index):
        with store.locked("ABCD") as session:
            join_session(session, f"p{index}", f"Player{index}")

    threads = [threading.Thread(target=join, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    session = store.lookup_session("ABCD")
    assert len(session.players) == 20
    assert sorted(p.number for p in session.players) == list(range(1, 21))


def test_created_holds_session_lock_until_setup_finishes():
    from showrelay.server.controllers import join_session

    store = SessionStore()
    joined = threading.Event()

    def join():
        with store.locked("ABCD") as session:
            join_session(session, "alice", "Alice")
        joined.set()

    with store.created("ABCD", "host") as session:
        assert store.lookup_session("ABCD") is session
        joiner = threading.Thread(target=join)
        joiner.start()
        assert not joined.wait(0.2)
        assert session.players == []

    joiner.join(timeout=5)
    assert joined.is_set()
    assert [p.name for p in store.lookup_session("ABCD").players] == ["Alice"]


def test_created_with_taken_code_raises_before_yielding(store):
    store.create_session("ABCD", "host")

    with pytest.raises(SessionExistsError):
        with store.created("ABCD", "other"):
            pytest.fail("block must not run for a taken code")
