"""State management for the graph system.

This module provides:
1. ValueKind / Value: the tagged values a state store holds
2. NodeStatus / GraphStatus: per-node and per-run status recorded during a run
3. StateStore: the synchronized, typed key-value context shared by every
   node of one run, plus a slot for the latest language-model response

Every StateStore operation is one short critical section under a
``threading.Lock``. The lock is never held across an ``await``, so a node
waiting on the network never blocks another node's access to state.
"""

import copy
import threading
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from llmgraph.core.errors import StateError
from llmgraph.core.logging import get_logger, LogComponent
from llmgraph.core.structured import dumps

logger = get_logger(LogComponent.STATE)


class ValueKind(str, Enum):
    """Kinds of value a state store can hold."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class NodeStatus(str, Enum):
    """Node execution status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class GraphStatus(str, Enum):
    """Lifecycle of a graph run."""
    BUILT = "built"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _is_number(data: Any) -> bool:
    return isinstance(data, (int, float)) and not isinstance(data, bool)


class Value(BaseModel):
    """A tagged state value.

    Attributes:
        kind: Which variant this value is
        data: The plain Python payload (str, int/float, bool, or JSON-like)
    """
    kind: ValueKind
    data: Any = None

    model_config = {"frozen": True}

    @model_validator(mode='after')
    def validate_kind(self) -> 'Value':
        if self.kind == ValueKind.STRING and not isinstance(self.data, str):
            raise ValueError(f"string value expected, got {type(self.data).__name__}")
        if self.kind == ValueKind.NUMBER and not _is_number(self.data):
            raise ValueError(f"number value expected, got {type(self.data).__name__}")
        if self.kind == ValueKind.BOOLEAN and not isinstance(self.data, bool):
            raise ValueError(f"boolean value expected, got {type(self.data).__name__}")
        return self

    @classmethod
    def string(cls, data: str) -> "Value":
        return cls(kind=ValueKind.STRING, data=data)

    @classmethod
    def number(cls, data: float) -> "Value":
        return cls(kind=ValueKind.NUMBER, data=data)

    @classmethod
    def boolean(cls, data: bool) -> "Value":
        return cls(kind=ValueKind.BOOLEAN, data=data)

    @classmethod
    def structured(cls, data: Any) -> "Value":
        return cls(kind=ValueKind.JSON, data=copy.deepcopy(data))

    @classmethod
    def of(cls, data: Any) -> "Value":
        """Wrap a plain Python object, inferring its kind."""
        if isinstance(data, Value):
            return data
        if isinstance(data, bool):
            return cls.boolean(data)
        if _is_number(data):
            return cls.number(data)
        if isinstance(data, str):
            return cls.string(data)
        return cls.structured(data)

    def as_text(self) -> Optional[str]:
        """Render the value for prompt substitution.

        Returns:
            The text form, or None for JSON values, which are not
            string-coercible.
        """
        if self.kind == ValueKind.STRING:
            return self.data
        if self.kind == ValueKind.BOOLEAN:
            return "true" if self.data else "false"
        if self.kind == ValueKind.NUMBER:
            if isinstance(self.data, float) and self.data.is_integer():
                return str(int(self.data))
            return str(self.data)
        return None


class StateStore(BaseModel):
    """
    Synchronized typed key-value store shared by the nodes of one run.

    Typed getters raise ``StateError`` with kind NOT_FOUND when a key is
    absent and TYPE_MISMATCH when the stored variant differs from the one
    asked for. Lock acquisition that times out, or a store poisoned by an
    exception escaping a critical section, raises LOCK_FAILURE.

    Attributes:
        lock_timeout: Seconds to wait for the lock (None waits forever)
        created_at: Time of store creation
        updated_at: Time of last modification
    """
    lock_timeout: Optional[float] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    _lock: Any = PrivateAttr(default_factory=threading.Lock)
    _poisoned: bool = PrivateAttr(default=False)
    _values: Dict[str, Value] = PrivateAttr(default_factory=dict)
    _llm_response: Optional[Any] = PrivateAttr(default=None)
    _has_llm_response: bool = PrivateAttr(default=False)
    _status: Dict[str, NodeStatus] = PrivateAttr(default_factory=dict)
    _errors: Dict[str, str] = PrivateAttr(default_factory=dict)
    _run_status: GraphStatus = PrivateAttr(default=GraphStatus.BUILT)
    _failed_node: Optional[str] = PrivateAttr(default=None)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        timeout = -1 if self.lock_timeout is None else self.lock_timeout
        if not self._lock.acquire(timeout=timeout):
            raise StateError.lock_failure(f"timed out after {self.lock_timeout}s")
        try:
            if self._poisoned:
                raise StateError.lock_failure("store was poisoned by an earlier failure")
            yield
        except StateError:
            raise
        except BaseException:
            self._poisoned = True
            logger.error("State store poisoned by an exception inside a critical section")
            raise
        finally:
            self._lock.release()

    def _touch(self) -> None:
        object.__setattr__(self, "updated_at", datetime.utcnow())

    def _lookup(self, key: str, kind: Optional[ValueKind]) -> Value:
        if key not in self._values:
            raise StateError.not_found(key)
        value = self._values[key]
        if kind is not None and value.kind != kind:
            raise StateError.type_mismatch(key, kind.value, value.kind.value)
        return value

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def recover(self) -> None:
        """Clear the poisoned flag after the caller has checked the store."""
        with self._lock:
            self._poisoned = False

    # Typed access

    def set_typed(self, key: str, value: Value) -> None:
        """Store a tagged value under key, replacing any previous value."""
        if value.kind == ValueKind.JSON:
            value = Value.structured(value.data)
        with self._locked():
            self._values[key] = value
            self._touch()

    def get_typed(self, key: str, kind: Optional[ValueKind] = None) -> Value:
        """Fetch the tagged value under key, optionally requiring a kind."""
        with self._locked():
            value = self._lookup(key, kind)
            if value.kind == ValueKind.JSON:
                return Value.structured(value.data)
            return value

    def set_string(self, key: str, value: str) -> None:
        self.set_typed(key, Value.string(value))

    def get_string(self, key: str) -> str:
        return self.get_typed(key, ValueKind.STRING).data

    def set_number(self, key: str, value: float) -> None:
        self.set_typed(key, Value.number(value))

    def get_number(self, key: str) -> float:
        return self.get_typed(key, ValueKind.NUMBER).data

    def set_bool(self, key: str, value: bool) -> None:
        self.set_typed(key, Value.boolean(value))

    def get_bool(self, key: str) -> bool:
        return self.get_typed(key, ValueKind.BOOLEAN).data

    def set_json(self, key: str, value: Any) -> None:
        self.set_typed(key, Value.structured(value))

    def get_json(self, key: str) -> Any:
        return self.get_typed(key, ValueKind.JSON).data

    def set_value(self, key: str, value: Any) -> None:
        """Store a plain Python object, inferring its kind."""
        self.set_typed(key, Value.of(value))

    def get_text(self, key: str) -> str:
        """Fetch a string-coercible value (string, number or boolean) as text."""
        with self._locked():
            value = self._lookup(key, None)
        text = value.as_text()
        if text is None:
            raise StateError.type_mismatch(key, "string-coercible", value.kind.value)
        return text

    def update(self, key: str, func: Callable[[Any], Any], kind: Optional[ValueKind] = None) -> Value:
        """Read, transform and write one key inside a single critical section.

        ``func`` receives the current plain value and returns the new one. It
        must not block or await.

        Returns:
            The stored Value
        """
        with self._locked():
            current = self._lookup(key, kind)
            data = copy.deepcopy(current.data) if current.kind == ValueKind.JSON else current.data
            updated = Value.of(func(data))
            self._values[key] = updated
            self._touch()
            return updated

    def has(self, key: str) -> bool:
        with self._locked():
            return key in self._values

    def keys(self) -> List[str]:
        with self._locked():
            return list(self._values)

    def remove(self, key: str) -> Value:
        """Delete a key and return the value it held."""
        with self._locked():
            value = self._lookup(key, None)
            del self._values[key]
            self._touch()
            return value

    def snapshot(self) -> Dict[str, Any]:
        """Copy of every key's plain value."""
        with self._locked():
            return {key: copy.deepcopy(value.data) for key, value in self._values.items()}

    # Language-model response slot

    def set_llm_response(self, response: Any) -> None:
        """Record the latest raw language-model response."""
        if isinstance(response, Value):
            response = response.data
        with self._locked():
            self._llm_response = copy.deepcopy(response)
            self._has_llm_response = True
            self._touch()

    def get_llm_response(self) -> Any:
        """Return the latest raw language-model response."""
        with self._locked():
            if not self._has_llm_response:
                raise StateError.not_found("llm_response")
            return copy.deepcopy(self._llm_response)

    # Run bookkeeping

    def mark_status(self, node_id: str, status: NodeStatus) -> None:
        with self._locked():
            self._status[node_id] = status
            self._touch()

    def status_of(self, node_id: str) -> Optional[NodeStatus]:
        with self._locked():
            return self._status.get(node_id)

    @property
    def statuses(self) -> Dict[str, NodeStatus]:
        with self._locked():
            return dict(self._status)

    def add_error(self, node_id: str, error: str) -> None:
        """Record an error message for a node."""
        with self._locked():
            self._errors[node_id] = error
            self._touch()

    @property
    def errors(self) -> Dict[str, str]:
        with self._locked():
            return dict(self._errors)

    def start_run(self) -> None:
        """Mark the run that owns this store as started."""
        with self._locked():
            self._run_status = GraphStatus.RUNNING
            self._failed_node = None
            self._touch()

    def finish_run(self, failed_node: Optional[str] = None) -> None:
        """Record how the owning run ended; a failed node means FAILED."""
        with self._locked():
            self._run_status = GraphStatus.FAILED if failed_node else GraphStatus.COMPLETED
            self._failed_node = failed_node
            self._touch()

    @property
    def run_status(self) -> GraphStatus:
        with self._locked():
            return self._run_status

    @property
    def failed_node(self) -> Optional[str]:
        with self._locked():
            return self._failed_node

    def log(self) -> None:
        """Dump the store's contents at DEBUG level, one line per key."""
        for key, value in sorted(self.snapshot().items()):
            logger.debug(f"state.{key} = {dumps(value)}")
