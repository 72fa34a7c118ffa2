"""
Lifecycle callback channels.

A ``CallbackRegistry`` is an explicit event-dispatch object. It is owned by
whoever runs the mutators (a GraphQL schema builder, an application
service, a test) and handed to them, so there is no process-wide callback
state.

Channel names follow ``<type>.<action>.<stage>``, e.g. ``foo2.create.after``.
Stages:

- ``validate``: returns a list of error messages (or a single message)
- ``before``: receives the pending document/patch, returns the next one
- ``after``: receives the stored document, returns the next one
- ``async``: receives the mutation properties, dispatched fire-and-forget
"""

import copy
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

import sentry_sdk
from django.db import close_old_connections

logger = logging.getLogger(__name__)

ACTIONS = ("create", "update", "delete")
STAGES = ("validate", "before", "after", "async")


def callback_channel(type_name: str, action: str, stage: str) -> str:
    """Build a channel name such as ``foo2.create.after``."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown callback action '{action}'")
    if stage not in STAGES:
        raise ValueError(f"Unknown callback stage '{stage}'")
    return f"{type_name.lower()}.{action}.{stage}"


def _callback_name(callback: Callable) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class AsyncDispatcher:
    """
    Runs fire-and-forget callbacks.

    With the ``thread`` backend callbacks run on a lazily created worker
    pool; with ``sync`` they run inline. Either way a failing callback is
    logged and reported to Sentry, never raised to the dispatcher's caller.
    """

    def __init__(self, backend: str = "thread", max_workers: int = 4):
        self.backend = (backend or "thread").lower()
        self.max_workers = max(1, int(max_workers or 1))
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()

    @classmethod
    def from_settings(cls) -> "AsyncDispatcher":
        from .settings import MutatorSettings

        settings = MutatorSettings.from_settings()
        return cls(backend=settings.async_backend, max_workers=settings.async_max_workers)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is not None:
            return self._executor
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="collection-forge-callbacks",
                )
        return self._executor

    def submit(self, channel: str, callback: Callable, *args: Any, **kwargs: Any) -> Optional[Future]:
        if self.backend == "sync":
            _invoke_isolated(channel, callback, args, kwargs, release_connections=False)
            return None

        if self.backend != "thread":
            logger.warning(
                "Unknown async callback backend '%s'; falling back to thread",
                self.backend,
            )
        future = self._get_executor().submit(
            _invoke_isolated, channel, callback, args, kwargs, True
        )
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    @property
    def pending_count(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for outstanding callbacks. Returns True when none are left."""
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait_for_pending)


def _invoke_isolated(
    channel: str,
    callback: Callable,
    args: tuple,
    kwargs: dict,
    release_connections: bool,
) -> None:
    try:
        callback(*args, **kwargs)
    except Exception as exc:
        logger.error(
            "Async callback %s on '%s' failed: %s",
            _callback_name(callback),
            channel,
            exc,
            exc_info=True,
        )
        sentry_sdk.capture_exception(exc)
    finally:
        if release_connections:
            close_old_connections()


class CallbackRegistry:
    """Named, multi-subscriber lifecycle hook points."""

    def __init__(self, dispatcher: Optional[AsyncDispatcher] = None):
        self._callbacks: dict[str, list[Callable]] = {}
        self._lock = threading.Lock()
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> AsyncDispatcher:
        if self._dispatcher is None:
            self._dispatcher = AsyncDispatcher.from_settings()
        return self._dispatcher

    def add_callback(self, channel: str, callback: Callable) -> Callable:
        """Subscribe ``callback`` to ``channel``. Returns the callback, so it works as a decorator."""
        if not callable(callback):
            raise TypeError(f"Callback for '{channel}' must be callable")
        with self._lock:
            self._callbacks.setdefault(channel, []).append(callback)
        logger.debug("Added callback %s to '%s'", _callback_name(callback), channel)
        return callback

    def on(self, channel: str) -> Callable[[Callable], Callable]:
        def decorator(callback: Callable) -> Callable:
            return self.add_callback(channel, callback)

        return decorator

    def remove_callback(self, channel: str, callback: Callable) -> bool:
        with self._lock:
            callbacks = self._callbacks.get(channel, [])
            if callback not in callbacks:
                return False
            callbacks.remove(callback)
            if not callbacks:
                self._callbacks.pop(channel, None)
        return True

    def remove_all_callbacks(self, channel: str) -> None:
        with self._lock:
            self._callbacks.pop(channel, None)

    def clear(self) -> None:
        with self._lock:
            self._callbacks.clear()

    def get_callbacks(self, channel: str) -> list[Callable]:
        with self._lock:
            return list(self._callbacks.get(channel, []))

    def has_callbacks(self, channel: str) -> bool:
        with self._lock:
            return bool(self._callbacks.get(channel))

    @property
    def channels(self) -> list[str]:
        with self._lock:
            return sorted(self._callbacks)

    def run(self, channel: str, item: Any, *args: Any, **kwargs: Any) -> Any:
        """
        Run a synchronous chain.

        Each callback receives the current item and returns the next one;
        returning ``None`` keeps the previous item. Exceptions propagate.
        """
        for callback in self.get_callbacks(channel):
            result = callback(item, *args, **kwargs)
            if result is not None:
                item = result
        return item

    def run_validators(self, channel: str, document: Any, *args: Any, **kwargs: Any) -> list[Any]:
        """Collect the errors reported by every validator on ``channel``."""
        errors: list[Any] = []
        for callback in self.get_callbacks(channel):
            result = callback(document, *args, **kwargs)
            if not result:
                continue
            if isinstance(result, (list, tuple)):
                errors.extend(result)
            else:
                errors.append(result)
        return errors

    def run_async(self, channel: str, properties: dict[str, Any]) -> int:
        """
        Dispatch every callback on ``channel`` without waiting for them.

        Each callback gets its own deep copy of ``properties["document"]``
        so nothing it does can reach the caller's result. Returns the number
        of dispatched callbacks.
        """
        callbacks = self.get_callbacks(channel)
        for callback in callbacks:
            payload = dict(properties)
            if "document" in payload:
                payload["document"] = copy.deepcopy(payload["document"])
            self.dispatcher.submit(channel, callback, payload)
        return len(callbacks)

    def drain(self, timeout: Optional[float] = None) -> bool:
        if self._dispatcher is None:
            return True
        return self._dispatcher.drain(timeout)
