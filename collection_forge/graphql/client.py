"""
In-process GraphQL client with fetch policies.

The client runs operations directly against a graphene schema using a
request-like context, and keeps a small result cache for the
``cache-first`` policy. Form adapters use it to load and mutate documents.
"""

import copy
import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from graphql import DocumentNode, print_ast

logger = logging.getLogger(__name__)

FETCH_POLICIES = ("cache-first", "network-only", "no-cache")


@dataclass
class QueryResult:
    data: Optional[dict[str, Any]] = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _source_text(source: Union[str, DocumentNode]) -> str:
    if isinstance(source, DocumentNode):
        return print_ast(source)
    return source


class GraphQLClient:
    """
    Execute queries and mutations against a schema.

    Args:
        schema: A ``graphene.Schema``
        context: Request-like object passed as ``context_value``
        user: Convenience for building a context when none is given
        executor: Optional executor for ``execute_async``
    """

    def __init__(
        self,
        schema: Any,
        *,
        context: Any = None,
        user: Any = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.schema = schema
        if context is None:
            from ..testing import build_context

            context = build_context(user=user)
        self.context = context
        self.executor = executor
        self._cache: dict[str, QueryResult] = {}

    @property
    def user(self) -> Any:
        return getattr(self.context, "user", None)

    def _cache_key(self, source: str, variables: Optional[dict[str, Any]]) -> str:
        return json.dumps([source, variables or {}], sort_keys=True, default=str)

    def execute(
        self,
        source: Union[str, DocumentNode],
        variables: Optional[dict[str, Any]] = None,
        *,
        operation_name: Optional[str] = None,
    ) -> QueryResult:
        result = self.schema.execute(
            _source_text(source),
            variable_values=variables,
            context_value=self.context,
            operation_name=operation_name,
        )
        errors = [str(getattr(error, "message", error)) for error in result.errors or []]
        if errors:
            logger.warning("GraphQL operation returned errors: %s", errors)
        return QueryResult(data=result.data, errors=errors)

    def query(
        self,
        source: Union[str, DocumentNode],
        variables: Optional[dict[str, Any]] = None,
        *,
        fetch_policy: str = "cache-first",
        operation_name: Optional[str] = None,
    ) -> QueryResult:
        if fetch_policy not in FETCH_POLICIES:
            raise ValueError(f"Unknown fetch policy '{fetch_policy}'")

        text = _source_text(source)
        key = self._cache_key(text, variables)
        if fetch_policy == "cache-first" and key in self._cache:
            return copy.deepcopy(self._cache[key])

        result = self.execute(text, variables, operation_name=operation_name)
        if fetch_policy != "no-cache" and result.ok:
            self._cache[key] = copy.deepcopy(result)
        return result

    def mutate(
        self,
        source: Union[str, DocumentNode],
        variables: Optional[dict[str, Any]] = None,
        *,
        operation_name: Optional[str] = None,
    ) -> QueryResult:
        result = self.execute(source, variables, operation_name=operation_name)
        self.clear_cache()
        return result

    def execute_async(
        self,
        source: Union[str, DocumentNode],
        variables: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> Future:
        """Run ``query`` on the executor; runs inline when there is none."""
        if self.executor is not None:
            return self.executor.submit(self.query, source, variables, **kwargs)
        future: Future = Future()
        try:
            future.set_result(self.query(source, variables, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def clear_cache(self) -> None:
        self._cache.clear()
