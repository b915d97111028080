import contextvars
import dataclasses
from typing import Any, List, Mapping, Optional

from pygraft.exceptions import ExecutionError


@dataclasses.dataclass(frozen=True)
class Identity:
    authenticated: bool = False
    subject_id: Optional[str] = None

    @classmethod
    def anonymous(cls):
        return cls()

    @classmethod
    def of(cls, subject_id):
        return cls(authenticated=True, subject_id=str(subject_id))


@dataclasses.dataclass
class ExecutionContext:
    identity: Identity = dataclasses.field(default_factory=Identity)
    variables: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    request: Optional[Any] = None
    errors: List[ExecutionError] = dataclasses.field(default_factory=list)

    def add_error(self, error: ExecutionError):
        self.errors.append(error)


context: contextvars.ContextVar[ExecutionContext] = contextvars.ContextVar('context')
