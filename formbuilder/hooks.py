"""Submission hooks - observers notified after a form is accepted."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """What the pipeline knows about the incoming request."""

    input: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class FormSubmitted:
    """Event payload handed to every registered hook.

    ``submission`` is None when submission storage is disabled.
    """

    form: Any
    data: dict[str, Any]
    submission: Any | None
    request: RequestContext


Hook = Callable[[FormSubmitted], Union[None, Awaitable[None]]]


class SubmissionHooks:
    """Ordered list of FormSubmitted observers.

    Hooks run in registration order inside the submitting request. Both
    plain and async callables are accepted. A hook that raises aborts the
    remaining hooks and the request.
    """

    def __init__(self, hooks: list[Hook] | None = None):
        self._hooks: list[Hook] = list(hooks or [])

    def register(self, hook: Hook) -> Hook:
        """Add a hook; returns it so this can be used as a decorator."""
        self._hooks.append(hook)
        return hook

    def unregister(self, hook: Hook) -> None:
        self._hooks.remove(hook)

    def clear(self) -> None:
        self._hooks.clear()

    def __len__(self) -> int:
        return len(self._hooks)

    def __iter__(self):
        return iter(list(self._hooks))

    async def dispatch(self, event: FormSubmitted) -> None:
        for hook in list(self._hooks):
            logger.debug("Dispatching FormSubmitted for %s to %r", event.form.slug, hook)
            result = hook(event)
            if inspect.isawaitable(result):
                await result
