import json
from collections.abc import Mapping
from starlette import status
from starlette.applications import Starlette
from starlette.endpoints import HTTPEndpoint
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route
from .auth import AnonymousIdentityResolver
from .encoder import GraphQLEncoder


class GraphQLView(HTTPEndpoint):
    server = None
    identity_resolver = AnonymousIdentityResolver()

    @classmethod
    def as_view(cls, server, identity_resolver=None):
        return type(cls.__name__, (cls,), {
            'server': server,
            'identity_resolver': identity_resolver or cls.identity_resolver,
        })

    async def post(self, request):
        content_type = request.headers.get("Content-Type", "")

        if "application/json" in content_type:
            try:
                data = await request.json()
            except ValueError:
                return PlainTextResponse(
                    "Request body is not valid JSON",
                    status_code=status.HTTP_400_BAD_REQUEST,
                )
        elif "application/graphql" in content_type:
            body = await request.body()
            try:
                text = body.decode()
            except UnicodeDecodeError:
                return PlainTextResponse(
                    "Request body is not valid UTF-8",
                    status_code=status.HTTP_400_BAD_REQUEST,
                )
            data = {"query": text}
        elif "query" in request.query_params:
            data = request.query_params
        else:
            return PlainTextResponse(
                "Unsupported Media Type",
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            )

        try:
            query = data["query"]
            variables = data.get("variables")
            operation_name = data.get("operationName")
        except (KeyError, TypeError, AttributeError):
            return PlainTextResponse(
                "No GraphQL query found in the request",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        if not isinstance(query, str):
            return PlainTextResponse(
                "The GraphQL query must be a string",
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        if isinstance(variables, str) and variables:
            try:
                variables = json.loads(variables)
            except ValueError:
                pass
        if variables and not isinstance(variables, Mapping):
            return PlainTextResponse(
                "Variables must be a JSON object",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        identity = self.identity_resolver.resolve(
            request.headers.get("Authorization")
        )
        result = await self.server.execute(
            query,
            variables=variables,
            identity=identity,
            request=request,
            operation_name=operation_name,
        )
        return Response(
            json.dumps(result, cls=GraphQLEncoder),
            status_code=self.server.status_code(result),
            media_type='application/json'
        )


def create_app(server, identity_resolver=None, path='/graphql', debug=False):
    return Starlette(
        debug=debug,
        routes=[
            Route(path, GraphQLView.as_view(server, identity_resolver)),
        ],
    )
