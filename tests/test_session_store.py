"""
Unit tests for the in-memory session store.
"""

import threading
import time

from ragchat.core.messages import Role
from ragchat.core.session_store import SessionStore


class TestSessionStore:
    """Tests for SessionStore."""

    def test_get_or_create_is_lazy_and_stable(self) -> None:
        store = SessionStore()
        assert store.session_ids() == []
        first = store.get_or_create("abc")
        assert store.get_or_create("abc") is first
        assert store.session_ids() == ["abc"]

    def test_new_session_has_empty_history(self) -> None:
        store = SessionStore()
        assert store.load_history(store.get_or_create("s1")) == []

    def test_turns_alternate_user_assistant_in_order(self) -> None:
        store = SessionStore()
        memory = store.get_or_create("s1")
        for i in range(3):
            store.append_turn(memory, f"q{i}", f"a{i}")
        history = store.load_history(memory)
        assert len(history) == 6
        assert [m.role for m in history] == [Role.USER, Role.ASSISTANT] * 3
        assert [m.content for m in history] == ["q0", "a0", "q1", "a1", "q2", "a2"]
        assert memory.turn_count == 3

    def test_load_history_returns_copy(self) -> None:
        store = SessionStore()
        memory = store.get_or_create("s1")
        store.append_turn(memory, "q", "a")
        history = store.load_history(memory)
        history.clear()
        assert len(store.load_history(memory)) == 2

    def test_sessions_are_isolated(self) -> None:
        store = SessionStore()
        store.append_turn(store.get_or_create("a"), "qa", "aa")
        assert store.get_history("b") == []
        assert [m.content for m in store.get_history("a")] == ["qa", "aa"]

    def test_get_history_does_not_create_session(self) -> None:
        store = SessionStore()
        assert store.get_history("unknown") == []
        assert store.session_ids() == []

    def test_clear(self) -> None:
        store = SessionStore()
        memory = store.get_or_create("a")
        store.append_turn(memory, "q", "a")
        assert store.clear("a") is True
        assert store.get_history("a") == []
        assert store.get_or_create("a") is memory
        assert store.clear("unknown") is False
        assert store.session_ids() == ["a"]

    def test_clear_waits_for_in_flight_request(self) -> None:
        store = SessionStore()
        original = store.get_or_create("s")
        entered = threading.Event()
        release = threading.Event()

        def request() -> None:
            with store.session("s") as memory:
                entered.set()
                release.wait(timeout=2)
                store.append_turn(memory, "q", "a")

        worker = threading.Thread(target=request)
        worker.start()
        assert entered.wait(timeout=2)
        clearer = threading.Thread(target=store.clear, args=("s",))
        clearer.start()
        clearer.join(timeout=0.1)
        assert clearer.is_alive()

        release.set()
        worker.join(timeout=2)
        clearer.join(timeout=2)
        assert not clearer.is_alive()
        # The in-flight turn landed before the wipe, and the same lock is still in use
        assert store.get_history("s") == []
        assert store.get_or_create("s") is original

    def test_same_session_requests_are_serialized(self) -> None:
        store = SessionStore()
        order: list[str] = []

        def request(name: str) -> None:
            with store.session("shared") as memory:
                history = store.load_history(memory)
                order.append(f"{name}:start:{len(history)}")
                time.sleep(0.02)
                store.append_turn(memory, name, f"reply-{name}")
                order.append(f"{name}:end")

        threads = [threading.Thread(target=request, args=(f"r{i}",)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Every request saw the turns of all requests that finished before it
        starts = [entry for entry in order if ":start:" in entry]
        assert sorted(int(s.rsplit(":", 1)[1]) for s in starts) == [0, 2, 4, 6]
        for i in range(0, len(order), 2):
            assert order[i].split(":")[0] == order[i + 1].split(":")[0]
        assert len(store.get_history("shared")) == 8

    def test_different_sessions_do_not_block(self) -> None:
        store = SessionStore()
        entered = threading.Event()
        release = threading.Event()

        def hold() -> None:
            with store.session("slow"):
                entered.set()
                release.wait(timeout=2)

        t = threading.Thread(target=hold)
        t.start()
        assert entered.wait(timeout=2)
        with store.session("fast") as memory:
            store.append_turn(memory, "q", "a")
        release.set()
        t.join()
        assert len(store.get_history("fast")) == 2
