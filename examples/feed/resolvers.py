import asyncio
import functools
from pygraft import (
    ResolverSet,
    Pagination,
    ValidationDetail,
    ValidationError,
    UnauthenticatedError,
    ForbiddenError,
    NotFoundError,
)
from pygraft import validator


NEW_USER_STATUS = 'I am new!'
NEWEST_FIRST = [('created_at', True)]


class UserExistsError(Exception):
    """
    Raised when signing up with a taken email, reported as a plain 500
    """


async def run_blocking(func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args))


def require_identity(context):
    if not context.identity.authenticated:
        raise UnauthenticatedError('Not authenticated!')
    return context.identity.subject_id


def validate_post_input(post_input):
    errors = []
    if validator.is_empty(post_input.title) \
       or not validator.is_length(post_input.title, min=5):
        errors.append(ValidationDetail('title', 'Title is invalid.'))
    if validator.is_empty(post_input.content) \
       or not validator.is_length(post_input.content, min=5):
        errors.append(ValidationDetail('content', 'Content is invalid.'))
    if errors:
        raise ValidationError(errors)


def build_resolvers(store, hasher, tokens, assets, pagination=Pagination()):
    """
    Resolvers of the feed schema

    `tokens` issues bearer tokens on login, `assets` clears the images of
    replaced or deleted posts.
    """
    resolvers = ResolverSet()

    async def find_post_of(subject_id, id):
        post = await store.posts.find_by_id(id)
        if post is None:
            raise NotFoundError('No post found!')
        if post['creator'] != subject_id:
            raise ForbiddenError('Not authorized!')
        return post

    async def find_user(subject_id):
        user = await store.users.find_by_id(subject_id)
        if user is None:
            raise NotFoundError('No user found!')
        return user

    @resolvers.field('Mutation')
    async def create_user(parent, context, user_input):
        errors = []
        if not validator.is_email(user_input.email):
            errors.append(ValidationDetail('email', 'E-Mail is invalid.'))
        if validator.is_empty(user_input.password) \
           or not validator.is_length(user_input.password, min=5):
            errors.append(ValidationDetail('password', 'Password too short!'))
        if errors:
            raise ValidationError(errors)

        if await store.users.find_one({'email': user_input.email}):
            raise UserExistsError('User exists already!')
        hashed = await run_blocking(hasher.hash, user_input.password)
        return await store.users.create({
            'email': user_input.email,
            'name': user_input.name,
            'password': hashed,
            'status': NEW_USER_STATUS,
        })

    @resolvers.field('Query')
    async def login(parent, context, email, password):
        user = await store.users.find_one({'email': email})
        if user is None:
            raise UnauthenticatedError('User not found.')
        if not await run_blocking(hasher.verify, password, user['password']):
            raise UnauthenticatedError('Password is incorrect.')
        token = tokens.issue(user['id'], email=user['email'])
        return {'token': token, 'userId': user['id']}

    @resolvers.field('Mutation')
    async def create_post(parent, context, post_input):
        subject_id = require_identity(context)
        validate_post_input(post_input)
        user = await store.users.find_by_id(subject_id)
        if user is None:
            raise UnauthenticatedError('Invalid user.')
        return await store.posts.create({
            'title': post_input.title,
            'content': post_input.content,
            'image_url': post_input.image_url,
            'creator': user['id'],
        })

    @resolvers.field('Query')
    async def posts(parent, context, page=None):
        require_identity(context)
        offset, limit = pagination.window(page)
        total = await store.posts.count()
        items = await store.posts.find_matching(
            sort=NEWEST_FIRST, skip=offset, limit=limit
        )
        return {'posts': items, 'totalPosts': total}

    @resolvers.field('Query')
    async def post(parent, context, id):
        require_identity(context)
        found = await store.posts.find_by_id(id)
        if found is None:
            raise NotFoundError('No post found!')
        return found

    @resolvers.field('Mutation')
    async def update_post(parent, context, id, post_input):
        subject_id = require_identity(context)
        post = await find_post_of(subject_id, id)
        validate_post_input(post_input)

        patch = {'title': post_input.title, 'content': post_input.content}
        replaced = None
        if post_input.image_url and post_input.image_url != post['image_url']:
            replaced = post['image_url']
            patch['image_url'] = post_input.image_url
        updated = await store.posts.update(id, patch)
        if updated is None:
            raise NotFoundError('No post found!')
        if replaced:
            await assets.clear(replaced)
        return updated

    @resolvers.field('Mutation')
    async def delete_post(parent, context, id):
        subject_id = require_identity(context)
        post = await find_post_of(subject_id, id)
        if post['image_url']:
            await assets.clear(post['image_url'])
        return await store.posts.delete(id)

    @resolvers.field('Query')
    async def user(parent, context):
        return await find_user(require_identity(context))

    @resolvers.field('Mutation')
    async def update_status(parent, context, status):
        subject_id = require_identity(context)
        await find_user(subject_id)
        return await store.users.update(subject_id, {'status': status})

    @resolvers.field('Post')
    async def creator(parent, context):
        return await store.users.find_by_id(parent['creator'])

    @resolvers.field('Post', 'createdAt')
    def post_created_at(parent, context):
        return parent['created_at'].isoformat()

    @resolvers.field('Post', 'updatedAt')
    def post_updated_at(parent, context):
        return parent['updated_at'].isoformat()

    @resolvers.field('User', 'posts')
    async def user_posts(parent, context):
        return await store.posts.find_matching(
            {'creator': parent['id']}, sort=NEWEST_FIRST
        )

    return resolvers
