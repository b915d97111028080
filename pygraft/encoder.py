import json
import dataclasses
from pygraft.exceptions import ExecutionError, OperationError
from pygraft.formatter import format_error


class GraphQLEncoder(json.JSONEncoder):

    def default(self, obj):
        if isinstance(obj, (ExecutionError, OperationError)):
            return format_error(obj)
        elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        elif isinstance(obj, Exception):
            return {'message': str(obj)}
        return super().default(obj)
