import dataclasses
from typing import Any, NewType
from graphql.type import (
    GraphQLScalarType,
    GraphQLString,
    GraphQLInt,
    GraphQLFloat,
    GraphQLBoolean,
    GraphQLID,
)
from pygraft.utils import (
    is_union,
    is_optional,
    is_list,
    shelling_type,
    type_name,
)
from pygraft.exceptions import SchemaError


ID = NewType('ID', str)


class _Unset:

    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclasses.dataclass(frozen=True)
class ScalarType:
    name: str
    python_type: Any
    gql_type: GraphQLScalarType

    def __str__(self):
        return f'scalar {self.name}'

    def serialize(self, value):
        return self.gql_type.serialize(value)

    def parse_literal(self, node):
        return self.gql_type.parse_literal(node)

    def parse_value(self, value):
        return self.gql_type.parse_value(value)


VALID_BASIC_TYPES = {
    str: 'String',
    int: 'Int',
    float: 'Float',
    bool: 'Boolean',
    ID: 'ID',
}

SCALARS = {
    scalar.name: scalar for scalar in (
        ScalarType('String', str, GraphQLString),
        ScalarType('Int', int, GraphQLInt),
        ScalarType('Float', float, GraphQLFloat),
        ScalarType('Boolean', bool, GraphQLBoolean),
        ScalarType('ID', ID, GraphQLID),
    )
}

SCALAR_ANNOTATIONS = {name: ptype for ptype, name in VALID_BASIC_TYPES.items()}


def named_type_name(gtype):
    """
    Name of the named type at the bottom of a wrapped annotation
    """
    shelled = shelling_type(gtype)
    if shelled in VALID_BASIC_TYPES:
        return VALID_BASIC_TYPES[shelled]
    name = type_name(shelled)
    if name is None:
        raise SchemaError(f'Can not convert type {gtype} to GraphQL type')
    return name


def print_type(gtype, nonnull=True):
    literal = None
    if is_union(gtype):
        if is_optional(gtype):
            return f'{print_type(gtype.__args__[0], nonnull=False)}'
        else:
            raise SchemaError(
                'Native Union type is not supported except Optional'
            )
    elif is_list(gtype):
        literal = f'[{print_type(gtype.__args__[0])}]'
    elif gtype in VALID_BASIC_TYPES:
        literal = VALID_BASIC_TYPES[gtype]
    elif type_name(gtype):
        literal = type_name(gtype)
    else:
        raise SchemaError(f'Can not convert type {gtype} to GraphQL type')

    if nonnull:
        literal += '!'
    return literal
