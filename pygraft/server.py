import json
import logging
from typing import Any, Mapping, Optional
from pygraft.context import ExecutionContext, Identity
from pygraft.encoder import GraphQLEncoder
from pygraft.exceptions import OperationError
from pygraft.executor import execute
from pygraft.formatter import format_error


class QueryServer:
    """
    Runs query documents against a schema and its resolvers

    The resolver bindings are checked against the schema on construction,
    so a missing resolver stops the process from starting.
    """

    def __init__(self, schema, resolvers, formatter=format_error):
        self.schema = schema.freeze()
        self.resolvers = resolvers.validate(self.schema)
        self.formatter = formatter

    async def execute(
        self,
        query: str,
        variables: Optional[Mapping[str, Any]] = None,
        identity: Optional[Identity] = None,
        request=None,
        operation_name: Optional[str] = None,
        serialize=False
    ):
        context = ExecutionContext(
            identity=identity or Identity.anonymous(),
            variables=dict(variables or {}),
            request=request
        )
        try:
            data, errors = await execute(
                self.schema,
                query,
                self.resolvers,
                context,
                operation_name=operation_name
            )
        except OperationError as e:
            logging.error('Rejected operation: %s', e)
            data, errors = None, [e]

        result = {'data': data}
        if errors:
            result['errors'] = [self.formatter(e) for e in errors]
        if serialize:
            return json.dumps(result, cls=GraphQLEncoder)
        return result

    @staticmethod
    def status_code(result) -> int:
        errors = result.get('errors')
        if not errors or result.get('data') is not None:
            return 200
        return errors[0].get('statusCode') or 400
