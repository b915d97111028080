import pytest
from typing import List, Optional
from pygraft import ID, Schema, Field, Argument, SchemaError, OperationError
from pygraft.types import ObjectType, InputType, ScalarType


def build_schema():
    schema = Schema()
    schema.define_type('Post', {
        'id': ID,
        'title': str,
        'creator': 'User',
    })
    schema.define_type('User', [
        Field('id', ID),
        Field('name', str, description='display name'),
        Field('posts', List['Post']),
    ])
    schema.define_input('PostInput', {
        'title': str,
        'imageUrl': Optional[str],
    })
    schema.define_operation_root('query', [
        Field('post', Optional['Post'], args=[Argument('id', ID)]),
        Field('posts', List['Post'], args=[Argument('page', Optional[int], default=1)]),
    ])
    schema.define_operation_root('mutation', [
        Field('createPost', 'Post', args={'postInput': 'PostInput'}),
    ])
    return schema.freeze()


def test_model_definition():
    schema = build_schema()
    user = schema.resolve_type('User')
    assert isinstance(user, ObjectType)
    assert list(user.fields) == ['id', 'name', 'posts']
    assert user.fields['name'] == Field('name', str, description='display name')
    assert schema.resolve_type('PostInput').fields['imageUrl'].ftype == Optional[str]
    assert isinstance(schema.resolve_type('String'), ScalarType)
    assert schema.resolve_type('Comment') is None


def test_operation_roots():
    schema = build_schema()
    assert schema.root('query').name == 'Query'
    assert schema.root('mutation').fields['createPost'].args['postInput'].atype == 'PostInput'

    only_query = Schema()
    only_query.define_operation_root('query', {'ping': str})
    only_query.freeze()
    with pytest.raises(OperationError):
        only_query.root('mutation')


def test_model_literal():
    schema = build_schema()
    assert str(schema.resolve_type('User')) == (
        'type User {\n'
        '  id: ID!\n'
        '  "display name"\n'
        '  name: String!\n'
        '  posts: [Post!]!\n'
        '}'
    )
    assert str(schema.resolve_type('Query')) == (
        'type Query {\n'
        '  post(\n'
        '    id: ID!\n'
        '  ): Post\n'
        '  posts(\n'
        '    page: Int = 1\n'
        '  ): [Post!]!\n'
        '}'
    )
    assert str(schema.resolve_type('PostInput')) == (
        'input PostInput {\n'
        '  title: String!\n'
        '  imageUrl: String\n'
        '}'
    )
    assert str(schema).endswith(
        'schema {\n  query: Query\n  mutation: Mutation\n}'
    )


def test_dangling_reference():
    schema = Schema()
    schema.define_type('Post', {'creator': 'User'})
    schema.define_operation_root('query', {'post': Optional['Post']})
    with pytest.raises(SchemaError, match='Can not find type User'):
        schema.freeze()


def test_dangling_argument_reference():
    schema = Schema()
    schema.define_operation_root('query', [
        Field('post', Optional[str], args=[Argument('where', 'PostFilter')]),
    ])
    with pytest.raises(SchemaError, match='Can not find type PostFilter'):
        schema.freeze()


def test_duplicate_fields():
    schema = Schema()
    with pytest.raises(SchemaError, match='declared twice'):
        schema.define_type('Post', [Field('id', ID), Field('id', str)])
    with pytest.raises(SchemaError, match='declared twice'):
        Field('post', str, args=[Argument('id', ID), Argument('id', str)])


def test_duplicate_types():
    schema = Schema()
    schema.define_type('Post', {'id': ID})
    with pytest.raises(SchemaError, match='defined twice'):
        schema.define_input('Post', {'id': ID})
    with pytest.raises(SchemaError, match='defined twice'):
        schema.define_type('String', {'id': ID})


def test_invalid_roots():
    schema = Schema()
    with pytest.raises(SchemaError):
        schema.define_operation_root('subscription', {'beat': int})
    schema.define_type('Post', {'id': ID})
    with pytest.raises(SchemaError, match='query root'):
        schema.freeze()


def test_frozen_schema():
    schema = build_schema()
    assert schema.frozen
    with pytest.raises(SchemaError, match='frozen'):
        schema.define_type('Comment', {'id': ID})
    with pytest.raises(TypeError):
        schema.types['Comment'] = None


def test_type_kinds():
    schema = Schema()
    schema.define_input('PostInput', {'title': str})
    schema.define_operation_root('query', {'post': 'PostInput'})
    with pytest.raises(SchemaError, match='must return an object or scalar'):
        schema.freeze()

    schema = Schema()
    schema.define_type('Post', {'title': str})
    schema.define_operation_root('query', [
        Field('post', Optional['Post'], args=[Argument('post', 'Post')]),
    ])
    with pytest.raises(SchemaError, match='must be an input or scalar'):
        schema.freeze()

    schema = Schema()
    schema.define_type('Post', {'title': str})
    schema.define_input('PostInput', {'post': 'Post'})
    schema.define_operation_root('query', {'ping': str})
    with pytest.raises(SchemaError, match='input or built-in'):
        schema.freeze()


def test_invalid_annotation():
    schema = Schema()
    schema.define_operation_root('query', {'ping': dict})
    with pytest.raises(SchemaError, match='Can not convert type'):
        schema.freeze()


def test_schema_from_sdl():
    schema = Schema.from_sdl('''
        """
        A published post
        """
        type Post {
          id: ID!
          tags: [String]
        }

        input PostFilter {
          tag: String = "news"
        }

        type Query {
          "Newest posts first"
          posts(page: Int = 1, filter: PostFilter): [Post!]!
        }
    ''')
    post = schema.resolve_type('Post')
    assert post.description == 'A published post'
    assert post.fields['tags'].ftype == Optional[List[Optional[str]]]
    assert post.fields['id'].ftype is ID

    posts = schema.root('query').fields['posts']
    assert posts.description == 'Newest posts first'
    assert posts.ftype == List['Post']
    assert posts.args['page'].default == 1
    assert posts.args['filter'].atype == Optional['PostFilter']
    assert isinstance(schema.resolve_type('PostFilter'), InputType)
    assert schema.resolve_type('PostFilter').fields['tag'].default == 'news'
    assert schema.frozen


def test_schema_from_sdl_with_schema_definition():
    schema = Schema.from_sdl('''
        schema {
          query: RootQuery
        }

        type RootQuery {
          ping: String
        }
    ''')
    assert schema.root('query').name == 'RootQuery'


def test_schema_from_sdl_errors():
    with pytest.raises(SchemaError):
        Schema.from_sdl('type Query {')
    with pytest.raises(SchemaError, match='not supported'):
        Schema.from_sdl('scalar Date\ntype Query { ping: String }')
    with pytest.raises(SchemaError, match='Can not find type Post'):
        Schema.from_sdl('type Query { post: Post }')


def test_schema_from_sdl_without_arguments():
    schema = Schema.from_sdl('''
        schema {
          query: Query
        }

        input Empty {
          flag: Boolean
        }

        type Query {
          a: Int
          b(flag: Boolean): Int
        }
    ''')
    query = schema.root('query')
    assert query.fields['a'].args == {}
    assert list(query.fields['b'].args) == ['flag']
