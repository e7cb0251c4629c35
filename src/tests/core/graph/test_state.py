"""Tests for graph state management.

This module tests the state store including:
- Typed set/get per value kind
- Missing keys and kind mismatches
- Structured value round-trips and copy isolation
- The language-model response slot
- Lock failures and poisoning
- Isolation between stores
"""

import asyncio
import threading

import pytest

from llmgraph.core.errors import StateError, StateErrorKind
from llmgraph.core.graph.state import StateStore, Value, ValueKind, NodeStatus


class TestValue:
    """Test suite for tagged values."""

    def test_infer_kinds(self):
        assert Value.of("x").kind == ValueKind.STRING
        assert Value.of(3).kind == ValueKind.NUMBER
        assert Value.of(2.5).kind == ValueKind.NUMBER
        assert Value.of(True).kind == ValueKind.BOOLEAN
        assert Value.of({"a": 1}).kind == ValueKind.JSON
        assert Value.of([1, 2]).kind == ValueKind.JSON
        assert Value.of(None).kind == ValueKind.JSON

    def test_bool_is_not_a_number(self):
        with pytest.raises(ValueError):
            Value.number(True)

    def test_kind_must_match_data(self):
        with pytest.raises(ValueError):
            Value(kind=ValueKind.STRING, data=5)
        with pytest.raises(ValueError):
            Value(kind=ValueKind.BOOLEAN, data="true")

    def test_as_text(self):
        assert Value.string("Paris").as_text() == "Paris"
        assert Value.number(34).as_text() == "34"
        assert Value.number(34.0).as_text() == "34"
        assert Value.number(2.5).as_text() == "2.5"
        assert Value.boolean(False).as_text() == "false"
        assert Value.structured({"a": 1}).as_text() is None


class TestTypedAccess:
    """Test suite for typed accessors."""

    def test_missing_key(self, state: StateStore):
        with pytest.raises(StateError) as exc_info:
            state.get_typed("k")
        assert exc_info.value.kind == StateErrorKind.NOT_FOUND
        assert exc_info.value.key == "k"

    def test_string_round_trip(self, state: StateStore):
        state.set_string("k", "x")
        assert state.get_string("k") == "x"

    def test_type_mismatch(self, state: StateStore):
        state.set_string("k", "x")
        with pytest.raises(StateError) as exc_info:
            state.get_number("k")
        assert exc_info.value.kind == StateErrorKind.TYPE_MISMATCH

    def test_number_and_bool(self, state: StateStore):
        state.set_number("temperature", 34)
        state.set_bool("sunny", True)
        assert state.get_number("temperature") == 34
        assert state.get_bool("sunny") is True
        with pytest.raises(StateError):
            state.get_bool("temperature")

    def test_get_typed_with_kind(self, state: StateStore):
        state.set_typed("k", Value.number(1.5))
        assert state.get_typed("k") == Value.number(1.5)
        assert state.get_typed("k", ValueKind.NUMBER).data == 1.5
        with pytest.raises(StateError):
            state.get_typed("k", ValueKind.STRING)

    def test_overwrite_changes_kind(self, state: StateStore):
        state.set_string("k", "x")
        state.set_number("k", 1)
        assert state.get_number("k") == 1

    def test_set_value_infers_kind(self, state: StateStore):
        state.set_value("location", "Paris")
        state.set_value("days", 3)
        state.set_value("filters", {"units": "C"})
        assert state.get_string("location") == "Paris"
        assert state.get_number("days") == 3
        assert state.get_json("filters") == {"units": "C"}

    def test_get_text(self, state: StateStore):
        state.set_number("n", 7)
        state.set_json("doc", {"a": 1})
        assert state.get_text("n") == "7"
        with pytest.raises(StateError) as exc_info:
            state.get_text("doc")
        assert exc_info.value.kind == StateErrorKind.TYPE_MISMATCH


class TestStructuredValues:
    """Test suite for JSON values."""

    @pytest.mark.parametrize("value", [
        {"location": "Paris", "days": [1, 2, 3]},
        [1, "two", {"three": 3.0}, None, True],
        "plain string",
        None,
    ])
    def test_round_trip(self, state: StateStore, value):
        state.set_json("k", value)
        assert state.get_json("k") == value

    def test_stored_copy_is_isolated(self, state: StateStore):
        doc = {"items": [1]}
        state.set_json("doc", doc)
        doc["items"].append(2)

        fetched = state.get_json("doc")
        fetched["items"].append(3)

        assert state.get_json("doc") == {"items": [1]}

    def test_update(self, state: StateStore):
        state.set_json("seen", [])
        state.update("seen", lambda seen: seen + ["a"], ValueKind.JSON)
        state.set_number("count", 1)
        state.update("count", lambda n: n + 1)
        assert state.get_json("seen") == ["a"]
        assert state.get_number("count") == 2

    def test_keys_remove_snapshot(self, state: StateStore):
        state.set_string("a", "1")
        state.set_number("b", 2)
        assert sorted(state.keys()) == ["a", "b"]
        assert state.snapshot() == {"a": "1", "b": 2}

        removed = state.remove("a")
        assert removed == Value.string("1")
        assert not state.has("a")
        with pytest.raises(StateError):
            state.remove("a")


class TestLLMResponseSlot:
    """Test suite for the language-model response slot."""

    def test_empty_slot(self, state: StateStore):
        with pytest.raises(StateError) as exc_info:
            state.get_llm_response()
        assert exc_info.value.kind == StateErrorKind.NOT_FOUND

    def test_set_and_get(self, state: StateStore, chat_response):
        response = chat_response("Washington, D.C.")
        state.set_llm_response(response)
        assert state.get_llm_response() == response

    def test_latest_response_wins(self, state: StateStore):
        state.set_llm_response({"n": 1})
        state.set_llm_response(Value.structured({"n": 2}))
        assert state.get_llm_response() == {"n": 2}


class TestLocking:
    """Test suite for lock failures."""

    def test_lock_timeout(self):
        state = StateStore(lock_timeout=0.01)
        state._lock.acquire()
        try:
            with pytest.raises(StateError) as exc_info:
                state.set_string("k", "x")
            assert exc_info.value.kind == StateErrorKind.LOCK_FAILURE
        finally:
            state._lock.release()

    def test_poisoned_store(self, state: StateStore):
        state.set_number("n", 1)

        def explode(value):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            state.update("n", explode)

        assert state.poisoned
        with pytest.raises(StateError) as exc_info:
            state.get_number("n")
        assert exc_info.value.kind == StateErrorKind.LOCK_FAILURE

        state.recover()
        assert state.get_number("n") == 1

    def test_state_errors_do_not_poison(self, state: StateStore):
        with pytest.raises(StateError):
            state.get_string("missing")
        assert not state.poisoned

    def test_threaded_updates(self, state: StateStore):
        state.set_number("count", 0)

        def work():
            for _ in range(200):
                state.update("count", lambda n: n + 1)

        threads = [threading.Thread(target=work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert state.get_number("count") == 800


class TestRunBookkeeping:
    """Test suite for node status and error tracking."""

    def test_status_tracking(self, state: StateStore):
        state.mark_status("node1", NodeStatus.RUNNING)
        assert state.status_of("node1") == NodeStatus.RUNNING
        assert state.status_of("node2") is None

    def test_errors(self, state: StateStore):
        state.add_error("node1", "Test error")
        assert state.errors == {"node1": "Test error"}


class TestStateIsolation:
    """Test suite for isolation between stores."""

    def test_separate_stores(self):
        state1 = StateStore()
        state2 = StateStore()
        state1.set_string("key", "value1")
        assert not state2.has("key")
        state2.set_string("key", "value2")
        assert state1.get_string("key") == "value1"

    @pytest.mark.asyncio
    async def test_concurrent_tasks(self):
        async def fill(store: StateStore, prefix: str):
            for i in range(10):
                store.set_number(f"{prefix}{i}", i)
                await asyncio.sleep(0)
            return store

        state1, state2 = await asyncio.gather(
            fill(StateStore(), "a"),
            fill(StateStore(), "b")
        )
        assert all(key.startswith("a") for key in state1.keys())
        assert all(key.startswith("b") for key in state2.keys())
