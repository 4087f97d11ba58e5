"""In-process ledger: shared objects, entry-point dispatch, all-or-nothing calls."""

from __future__ import annotations

import hashlib
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Protocol, Tuple

from .errors import LedgerError, ObjectNotFound, SchemaError, SizeLimitError
from .identity import Address
from .messages import TransactCall, decode_call

logger = logging.getLogger(__name__)


class SharedObject(Protocol):
    def snapshot(self) -> Any:
        ...

    def restore(self, state: Any) -> None:
        ...


@dataclass(frozen=True)
class TxContext:
    """Per-call context; ``sender`` is set by the ledger, never by the caller."""

    sender: Address
    digest: str
    events: List["Event"] = field(default_factory=list)

    def emit(self, event: "Event") -> None:
        self.events.append(event)


@dataclass(frozen=True)
class Event:
    type: str
    fields: Dict[str, Any]


@dataclass(frozen=True)
class TransactionResult:
    success: bool
    digest: str
    events: Tuple[Event, ...] = ()


Handler = Callable[[TxContext, Any, TransactCall], None]


class Ledger:
    """
    Minimal ledger stand-in for executing pool calls.

    Calls run one at a time. A call either finishes and keeps its effects
    and events, or fails and leaves every object as it was.

    The event log is append-only: events of successful calls are kept for
    the lifetime of the ledger and never pruned.

    Example:
        >>> ledger = Ledger()
        >>> pool_id = ledger.publish_shared(pool)
        >>> ledger.register(PACKAGE_ID, "vortex", "transact", handler)
        >>> result = ledger.execute(sender, encode_call(call))
    """

    def __init__(self) -> None:
        self._objects: Dict[str, SharedObject] = {}
        self._handlers: Dict[Tuple[str, str, str], Handler] = {}
        self._events: List[Event] = []
        self._lock = threading.Lock()
        self._nonce = 0

    def _next_digest(self, label: bytes) -> str:
        self._nonce += 1
        h = hashlib.sha256()
        h.update(label)
        h.update(self._nonce.to_bytes(8, "big"))
        return "0x" + h.hexdigest()

    def publish_shared(self, obj: SharedObject) -> str:
        with self._lock:
            object_id = self._next_digest(b"object")
            self._objects[object_id] = obj
        logger.debug("Published shared object %s", object_id)
        return object_id

    def get_object(self, object_id: str) -> SharedObject:
        try:
            return self._objects[object_id]
        except KeyError:
            raise ObjectNotFound(f"unknown object: {object_id}")

    def is_registered(self, package: str, module: str, function: str) -> bool:
        return (package, module, function) in self._handlers

    def register(self, package: str, module: str, function: str, handler: Handler) -> None:
        key = (package, module, function)
        if key in self._handlers:
            raise LedgerError(f"entry point already registered: {'::'.join(key)}")
        self._handlers[key] = handler

    @property
    def events(self) -> Tuple[Event, ...]:
        """Every event emitted so far, oldest first. Only grows."""
        return tuple(self._events)

    def execute(self, sender: Address, call_bytes: bytes) -> TransactionResult:
        """
        Decode and run one call as ``sender``.

        Any failure inside the entry point rolls back the target object and
        drops the call's events; the result carries no failure reason.
        """
        with self._lock:
            digest = self._next_digest(b"tx")
            try:
                call = decode_call(call_bytes)
            except (SchemaError, SizeLimitError) as exc:
                logger.debug("Rejected call %s: %s", digest, exc)
                return TransactionResult(success=False, digest=digest)

            handler = self._handlers.get(call.target)
            target = self._objects.get(call.pool_id)
            if handler is None or target is None:
                logger.debug("Rejected call %s: unknown target", digest)
                return TransactionResult(success=False, digest=digest)

            ctx = TxContext(sender=sender, digest=digest)
            state = target.snapshot()
            try:
                handler(ctx, target, call)
            except Exception as exc:
                target.restore(state)
                logger.debug("Call %s aborted: %s", digest, type(exc).__name__)
                return TransactionResult(success=False, digest=digest)

            self._events.extend(ctx.events)
            return TransactionResult(success=True, digest=digest, events=tuple(ctx.events))
