import logging
import uvicorn
from pygraft import QueryServer, create_app
from pygraft.auth import JWTIdentityResolver
from pygraft.config import get_settings
from examples.feed.resolvers import build_resolvers
from examples.feed.schema import schema
from examples.feed.security import CryptContextHasher
from examples.feed.storage import MemoryStore, MemoryAssetStore


def create_feed_app(settings=None, store=None, assets=None, hasher=None):
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    tokens = JWTIdentityResolver.from_settings(settings)
    resolvers = build_resolvers(
        store or MemoryStore(),
        hasher or CryptContextHasher(),
        tokens,
        assets or MemoryAssetStore(),
        pagination=settings.pagination,
    )
    server = QueryServer(schema, resolvers)
    return create_app(
        server, tokens, path=settings.GRAPHQL_PATH, debug=settings.DEBUG
    )


if __name__ == '__main__':
    uvicorn.run(create_feed_app(), host='0.0.0.0', port=8000)
