import dataclasses
from typing import Any, List, Optional


class SchemaError(Exception):
    pass


class OperationError(Exception):
    pass


class ExecutionError(Exception):
    """
    An error located in the operation document, collected while executing
    """

    def __init__(self, message, nodes=None, path=None, original_error=None):
        super().__init__(message)
        self.message = message
        self.locations = [
            node.loc.source.get_location(node.loc.start)
            for node in nodes or () if node.loc
        ]
        self.path = list(path) if path is not None else None
        self.original_error = original_error

    @property
    def formatted(self):
        return {
            'message': self.message,
            'locations': [
                {'line': loc.line, 'column': loc.column}
                for loc in self.locations
            ] or None,
            'path': self.path
        }


class FieldNotFoundError(ExecutionError):
    pass


class ArgumentError(ExecutionError):
    pass


class NonNullError(ExecutionError):
    pass


@dataclasses.dataclass(frozen=True)
class ValidationDetail:
    field: str
    message: str


class ClassifiedError(Exception):
    status_code: Optional[int] = None
    default_message = 'An error occurred.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)

    @property
    def detail(self) -> Any:
        return None


class UnauthenticatedError(ClassifiedError):
    status_code = 401
    default_message = 'Not authenticated!'


class ForbiddenError(ClassifiedError):
    status_code = 403
    default_message = 'Not authorized!'


class NotFoundError(ClassifiedError):
    status_code = 404
    default_message = 'Not found.'


class ConflictError(ClassifiedError):
    status_code = 409
    default_message = 'Conflict.'


class ValidationError(ClassifiedError):
    status_code = 422
    default_message = 'Invalid input.'

    def __init__(self, details: List[ValidationDetail], message=None):
        super().__init__(message)
        self.details = list(details)

    @property
    def detail(self):
        return [dataclasses.asdict(d) for d in self.details]


class CoercionError(ValueError):
    pass
