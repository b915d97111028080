import pytest
from graphql.language import parse
from pygraft import (
    Schema,
    ResolverSet,
    ExecutionContext,
    Identity,
    OperationError,
    FieldNotFoundError,
    UnauthenticatedError,
    execute
)
from pygraft.exceptions import ArgumentError, NonNullError


pytestmark = pytest.mark.asyncio


schema = Schema.from_sdl('''
type Patron {
  id: ID!
  name: String!
  age: Int
  friends: [Patron!]
  secret: String!
}

type Address {
  latlng: String!
  patron: Patron
}

input GeoInput {
  lat: Float!
  lng: Float!
  label: String = "home"
}

type Query {
  patron: Patron
  strictPatron: Patron!
  patrons(ids: [Int!]!): [Patron!]!
  address(geo: GeoInput!): Address
  exception(content: String!): String
  greeting(name: String = "world", punctuation: String): String
  whoami: String
}

type Mutation {
  rename(name: String!): Patron
}
''')

resolvers = ResolverSet()


@resolvers.field('Query')
def patron(parent, context):
    return {'id': 1, 'name': 'Syrus', 'age': 27, 'friends': [
        {'id': 2, 'name': 'Ann', 'age': None},
        {'id': 3, 'name': 'Bob', 'age': 30},
    ]}


@resolvers.field('Query')
def strict_patron(parent, context):
    raise UnauthenticatedError()


@resolvers.field('Query')
async def patrons(parent, context, ids):
    return [{'id': i, 'name': 'Syrus', 'age': 27} for i in ids]


@resolvers.field('Query')
def address(parent, context, geo):
    return {'latlng': f'({geo.lat},{geo.lng}) {geo.label}'}


@resolvers.field('Query')
def exception(parent, context, content):
    raise RuntimeError(content)


@resolvers.field('Query')
def greeting(parent, context, name, punctuation='!'):
    return f'hello {name}{punctuation}'


@resolvers.field('Query')
def whoami(parent, context):
    return context.identity.subject_id


@resolvers.field('Patron')
def secret(parent, context):
    if parent['id'] == 2:
        raise UnauthenticatedError()
    return f"secret of {parent['name']}"


@resolvers.field('Mutation')
def rename(parent, context, name):
    return {'id': 1, 'name': name}


resolvers.validate(schema)


async def run(query, **variables):
    context = ExecutionContext(variables=variables)
    return await execute(schema, query, resolvers, context)


async def test_simple_query():
    data, errors = await run('''
        query something {
          patron {
            id
            name
            age
          }
        }
    ''')
    assert errors == []
    assert data == {'patron': {'id': '1', 'name': 'Syrus', 'age': 27}}


async def test_document_order():
    data, errors = await run('''
        {
          patron {
            age
            name
            id
          }
          whoami
        }
    ''')
    assert list(data) == ['patron', 'whoami']
    assert list(data['patron']) == ['age', 'name', 'id']


async def test_alias_field():
    data, errors = await run('''
        query something {
          user: patron {
            id
            firstName: name
            age
          }
        }
    ''')
    assert data == {'user': {'id': '1', 'firstName': 'Syrus', 'age': 27}}


async def test_list_field():
    data, errors = await run('''
        query {
          patrons(ids: [1, 2, 3]) {
            id
          }
        }
    ''')
    assert data == {'patrons': [{'id': '1'}, {'id': '2'}, {'id': '3'}]}


async def test_input_object():
    data, errors = await run('''
        query something {
          address(geo: {lat: 32.2, lng: 12}) {
            latlng
          }
        }
    ''')
    assert errors == []
    assert data == {'address': {'latlng': '(32.2,12.0) home'}}


async def test_variables():
    query = '''
        query something($geo: GeoInput!) {
          address(geo: $geo) {
            latlng
          }
        }
    '''
    data, errors = await run(query, geo={'lat': 32.2, 'lng': 12, 'label': 'work'})
    assert data == {'address': {'latlng': '(32.2,12.0) work'}}

    query = '''
        query something($ids: [Int!]!) {
          patrons(ids: $ids) {
            id
          }
        }
    '''
    data, errors = await run(query, ids=[1, 2])
    assert data == {'patrons': [{'id': '1'}, {'id': '2'}]}


async def test_argument_defaults():
    data, errors = await run('''
        {
          a: greeting
          b: greeting(name: "you", punctuation: "?")
        }
    ''')
    assert data == {'a': 'hello world!', 'b': 'hello you?'}

    query = '''
        query greet($name: String = "there") {
          greeting(name: $name)
        }
    '''
    data, errors = await run(query)
    assert data == {'greeting': 'hello there!'}
    data, errors = await run(query, name='Ann')
    assert data == {'greeting': 'hello Ann!'}


async def test_raise_error():
    data, errors = await run('''
        query test {
            exception(content: "test")
            whoami
        }
    ''')
    assert data == {'exception': None, 'whoami': None}
    assert len(errors) == 1
    assert errors[0].message == 'test'
    assert errors[0].path == ['exception']
    assert errors[0].formatted['locations'] == [{'line': 3, 'column': 13}]
    assert isinstance(errors[0].original_error, RuntimeError)


async def test_field_not_found_continues():
    data, errors = await run('''
        {
          patron {
            id
            nickname
            name
          }
        }
    ''')
    assert data == {'patron': {'id': '1', 'name': 'Syrus'}}
    assert len(errors) == 1
    assert isinstance(errors[0], FieldNotFoundError)
    assert errors[0].path == ['patron', 'nickname']


async def test_argument_errors():
    data, errors = await run('''
        {
          patrons(ids: ["a"]) { id }
        }
    ''')
    assert data is None
    assert isinstance(errors[0], ArgumentError)

    data, errors = await run('{ greeting(nickname: "x") }')
    assert data == {'greeting': None}
    assert "Unknown argument 'nickname'" in errors[0].message

    data, errors = await run('{ address { latlng } }')
    assert data == {'address': None}
    assert "Argument 'geo' of required type 'GeoInput!'" in errors[0].message

    data, errors = await run('{ address(geo: {lat: 1}) { latlng } }')
    assert data == {'address': None}
    assert "'GeoInput.lng'" in errors[0].message


async def test_non_null_propagation():
    data, errors = await run('''
        {
          patron {
            friends {
              id
              secret
            }
          }
          whoami
        }
    ''')
    # Ann's secret fails, voiding Ann, then the non-null list item voids
    # the nullable friends list
    assert data == {'patron': {'friends': None}, 'whoami': None}
    assert len(errors) == 1
    assert errors[0].message == 'Not authenticated!'
    assert errors[0].path == ['patron', 'friends', 0, 'secret']


async def test_non_null_root_field():
    data, errors = await run('''
        {
          whoami
          strictPatron { id }
        }
    ''')
    assert data is None
    assert [e.message for e in errors] == ['Not authenticated!']


async def test_null_for_non_null_field():
    data, errors = await run('''
        {
          patron {
            friends {
              name
              age
            }
          }
        }
    ''')
    assert data['patron']['friends'] == [
        {'name': 'Ann', 'age': None}, {'name': 'Bob', 'age': 30}
    ]

    data, errors = await run('{ patrons(ids: []) { id } }')
    assert data == {'patrons': []}


async def test_missing_non_null_value():
    resolvers = ResolverSet()
    resolvers.bind('Query', 'patron', lambda parent, context: {'id': 1})
    data, errors = await execute(schema, '{ patron { id name } }', resolvers)
    assert data == {'patron': None}
    assert isinstance(errors[0], NonNullError)
    assert errors[0].message == \
        'Cannot return null for non-nullable field Patron.name.'


async def test_fragments():
    data, errors = await run('''
        query {
          patron {
            ...names
            ... on Patron {
              age
            }
            ... on Address {
              latlng
            }
          }
        }

        fragment names on Patron {
          id
          name
        }
    ''')
    assert errors == []
    assert data == {'patron': {'id': '1', 'name': 'Syrus', 'age': 27}}


async def test_directives_and_typename():
    query = '''
        query ($withAge: Boolean!) {
          patron {
            __typename
            name @skip(if: true)
            age @include(if: $withAge)
          }
        }
    '''
    data, errors = await run(query, withAge=False)
    assert data == {'patron': {'__typename': 'Patron'}}
    data, errors = await run(query, withAge=True)
    assert data == {'patron': {'__typename': 'Patron', 'age': 27}}


async def test_missing_selection_set():
    data, errors = await run('{ patron }')
    assert data == {'patron': None}
    assert 'must have a selection of subfields' in errors[0].message


async def test_mutation():
    data, errors = await run('''
        mutation {
          first: rename(name: "Ann") { name }
          second: rename(name: "Bob") { name }
        }
    ''')
    assert data == {'first': {'name': 'Ann'}, 'second': {'name': 'Bob'}}


async def test_context_identity():
    context = ExecutionContext(identity=Identity.of(42))
    data, errors = await execute(schema, '{ whoami }', resolvers, context)
    assert data == {'whoami': '42'}


async def test_parsed_document():
    data, errors = await execute(schema, parse('{ whoami }'), resolvers)
    assert data == {'whoami': None}


async def test_idempotent_read():
    query = '{ patron { id name friends { id name age } } }'
    assert await run(query) == await run(query)


async def test_operation_errors():
    with pytest.raises(OperationError):
        await run('subscription { beat }')
    with pytest.raises(OperationError):
        await run('{ whoami ')
    with pytest.raises(OperationError):
        await run('query a { whoami } query b { whoami }')
    with pytest.raises(OperationError):
        await run('fragment names on Patron { id }')

    mutation_less = Schema.from_sdl('type Query { ping: String }')
    with pytest.raises(OperationError):
        await execute(mutation_less, 'mutation { ping }', ResolverSet())


async def test_operation_name():
    document = 'query a { whoami } query b { greeting }'
    data, errors = await execute(
        schema, document, resolvers, operation_name='b'
    )
    assert data == {'greeting': 'hello world!'}
    with pytest.raises(OperationError):
        await execute(schema, document, resolvers, operation_name='c')


async def test_undefined_variable_in_list():
    data, errors = await run('''
        query ($x: Int) {
          patrons(ids: [1, $x]) { id }
        }
    ''')
    assert data is None
    assert len(errors) == 1
    assert isinstance(errors[0], ArgumentError)
    assert 'non-null type Int!' in errors[0].message


async def test_variable_types():
    query = '''
        query ($s: Boolean!) {
          whoami @skip(if: $s)
          patron { id }
        }
    '''
    data, errors = await run(query, s='false')
    assert data is None
    assert errors[0].message.startswith("Variable '$s' got invalid value")
    assert errors[0].formatted['path'] is None
    assert errors[0].formatted['locations'] == [{'line': 2, 'column': 16}]

    data, errors = await run(query)
    assert data is None
    assert errors[0].message == \
        "Variable '$s' of required type 'Boolean!' was not provided."

    data, errors = await run(query, s=True)
    assert data == {'patron': {'id': '1'}}
    assert errors == []

    data, errors = await run('query ($p: Patron) { whoami }')
    assert data is None
    assert 'cannot be non-input type' in errors[0].message
