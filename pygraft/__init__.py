from .types import ID, Schema, Field, Argument, ObjectType, InputType
from .context import Identity, ExecutionContext
from .exceptions import (
    SchemaError,
    OperationError,
    ExecutionError,
    FieldNotFoundError,
    ClassifiedError,
    UnauthenticatedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ValidationError,
    ValidationDetail
)
from .resolvers import ResolverSet
from .executor import execute, ExecutionResult
from .formatter import format_error
from .pagination import Pagination
from .server import QueryServer
from .view import GraphQLView, create_app


__version__ = '0.1.0'
__all__ = [
    'ID',
    'Schema',
    'Field',
    'Argument',
    'ObjectType',
    'InputType',
    'Identity',
    'ExecutionContext',
    'SchemaError',
    'OperationError',
    'ExecutionError',
    'FieldNotFoundError',
    'ClassifiedError',
    'UnauthenticatedError',
    'ForbiddenError',
    'NotFoundError',
    'ConflictError',
    'ValidationError',
    'ValidationDetail',
    'ResolverSet',
    'execute',
    'ExecutionResult',
    'format_error',
    'Pagination',
    'QueryServer',
    'GraphQLView',
    'create_app'
]
