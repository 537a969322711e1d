"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Todo example: models and a view model driving CRUD calls through
``NetworkClient``.

The view model exposes its state as immutable ``TodoState`` snapshots and
notifies registered listeners on every change, so any front end (the CLI
here) can render loading, result and error states.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pksnetwork.core.request import CachePolicy, HTTPMethod, ParametersEncoding, Request
from pksnetwork.core.retry import RetryPolicy, send_with_retry
from pksnetwork.exceptions import NetworkError
from pksnetwork.logging_config import get_logger
from pksnetwork.sdk.client import NetworkClient

logger = get_logger(__name__)


class Todo(BaseModel):
    """Todo item returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId")
    id: Optional[int] = None
    title: Optional[str] = None
    completed: Optional[bool] = None


class TodoRequest(BaseModel):
    """Todo payload sent when creating or updating."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    completed: bool
    user_id: int = Field(alias="userId")


@dataclass(frozen=True)
class TodoState:
    """Snapshot of the view model state."""
    todo: Optional[Todo] = None
    is_loading: bool = False
    error_message: Optional[str] = None
    operation_result: Optional[str] = None


StateChangeCallback = Callable[[TodoState], None]


class TodoViewModel:
    """
    CRUD operations on ``/todos`` with explicit state-change notification.

    Args:
        client: Blocking network client
        retry_policy: Optional backoff schedule applied to every call
        timeout_interval: Per-request timeout in seconds
        requires_authentication: Attach a bearer token to every call
        cache_policy: Cache policy for every call; when None, fetches
            revalidate and writes use the ``Request`` default
    """

    def __init__(
        self,
        client: NetworkClient,
        retry_policy: Optional[RetryPolicy] = None,
        timeout_interval: float = 30.0,
        requires_authentication: bool = False,
        cache_policy: Optional[CachePolicy] = None,
    ) -> None:
        self._client = client
        self._retry_policy = retry_policy
        self._timeout_interval = timeout_interval
        self._requires_authentication = requires_authentication
        self._cache_policy = cache_policy
        self._state = TodoState()
        self._listeners: List[StateChangeCallback] = []

    @property
    def state(self) -> TodoState:
        return self._state

    def on_state_change(self, callback: StateChangeCallback) -> None:
        """Register a listener called with every new ``TodoState``."""
        self._listeners.append(callback)

    def _set_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in self._listeners:
            try:
                listener(self._state)
            except Exception as exc:
                logger.error(f"on_state_change listener error: {exc}", exc_info=True)

    def _request(self, path: str, method: HTTPMethod, **kwargs) -> Request:
        if self._cache_policy is not None:
            kwargs["cache_policy"] = self._cache_policy
        return Request(
            path=path,
            method=method,
            requires_authentication=self._requires_authentication,
            timeout_interval=self._timeout_interval,
            retry_policy=self._retry_policy,
            **kwargs,
        )

    def _run(self, operation: Callable[[], Optional[str]]) -> bool:
        self._set_state(is_loading=True, error_message=None, operation_result=None)
        try:
            result = operation()
        except NetworkError as e:
            self._set_state(is_loading=False, error_message=str(e))
            return False
        self._set_state(is_loading=False, operation_result=result)
        return True

    def _current_id(self, todo_id: Optional[int], action: str) -> Optional[int]:
        if todo_id is not None:
            return todo_id
        if self._state.todo is None:
            self._set_state(error_message=f"No todo to {action}", operation_result=None)
            return None
        return self._state.todo.id if self._state.todo.id is not None else 1

    def fetch_todo(self, todo_id: int = 1) -> bool:
        """Fetch a todo with a GET request."""
        def operation() -> str:
            request = self._request(
                f"todos/{todo_id}",
                HTTPMethod.GET,
                cache_policy=CachePolicy.RELOAD_REVALIDATING_CACHE_DATA,
            )
            todo = send_with_retry(self._client, request, Todo)
            self._set_state(todo=todo)
            return "GET operation successful"

        return self._run(operation)

    def create_todo(self, title: str, completed: bool = False, user_id: int = 1) -> bool:
        """Create a todo with a POST request."""
        def operation() -> str:
            request = self._request(
                "todos",
                HTTPMethod.POST,
                parameters=TodoRequest(title=title, completed=completed, user_id=user_id),
                parameters_encoding=ParametersEncoding.JSON_ENCODED,
            )
            created = send_with_retry(self._client, request, Todo)
            self._set_state(todo=created)
            return f"POST operation successful. Created Todo with ID: {created.id}"

        return self._run(operation)

    def update_todo(
        self,
        title: str,
        completed: bool = True,
        todo_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> bool:
        """Update a todo (the current one by default) with a PATCH request."""
        target_id = self._current_id(todo_id, "update")
        if target_id is None:
            return False

        if user_id is None:
            current = self._state.todo
            user_id = current.user_id if current is not None and current.user_id is not None else 1

        def operation() -> str:
            request = self._request(
                f"todos/{target_id}",
                HTTPMethod.PATCH,
                parameters=TodoRequest(title=title, completed=completed, user_id=user_id),
                parameters_encoding=ParametersEncoding.JSON_ENCODED,
            )
            updated = send_with_retry(self._client, request, Todo)
            self._set_state(todo=updated)
            return f"PATCH operation successful. Updated Todo with ID: {updated.id}"

        return self._run(operation)

    def delete_todo(self, todo_id: Optional[int] = None) -> bool:
        """Delete a todo (the current one by default) with a DELETE request."""
        target_id = self._current_id(todo_id, "delete")
        if target_id is None:
            return False

        def operation() -> str:
            request = self._request(f"todos/{target_id}", HTTPMethod.DELETE)
            send_with_retry(self._client, request)
            self._set_state(todo=None)
            return f"DELETE operation successful. Deleted Todo with ID: {target_id}"

        return self._run(operation)
