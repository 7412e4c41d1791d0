"""Ports — the repository interfaces TaskService consumes.

Invariants:
    - The service depends on these Protocols, never on concrete repositories
    - Every method returning rows returns a closeable row cursor (RowCursor);
      the caller owns its release
    - Criteria, statements and models are typed Any to keep core/ free of
      SQLAlchemy imports

Design Decisions:
    - Protocols over ABCs: in-memory fakes satisfy them structurally in tests
"""

from typing import Any, Callable, ContextManager, Iterable, Protocol, Sequence

from taskdata.core.domain_types import TaskId

SaveListener = Callable[[Any, bool], None]
# Called as listener(task, is_new) after every successful task save.


class TaskStore(Protocol):
    def fetch(self, task_id: TaskId, *columns: Any) -> Any | None: ...
    def save(self, task: Any) -> bool: ...
    def create_new(self, task: Any) -> bool: ...
    def delete(self, task_id: TaskId) -> bool: ...
    def query(self, statement: Any) -> Any: ...
    def query_template(self, columns: Sequence[Any], template: str) -> Any: ...
    def raw_query(
        self, selection: str | None, selection_args: Iterable[Any] | None, *columns: Any,
    ) -> Any: ...
    def update_multiple(self, values: dict[str, Any], criterion: Any) -> int: ...
    def delete_where(self, criterion: Any) -> int: ...
    def render(self, clause: Any) -> str: ...
    def transaction(self) -> ContextManager[Any]: ...


class MetadataStore(Protocol):
    def query(self, statement: Any) -> Any: ...
    def create_new(self, metadata: Any) -> bool: ...
