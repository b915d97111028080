from types import MappingProxyType
from typing import List, Optional
from graphql.error import GraphQLError
from graphql.language import parse
from graphql.language.ast import (
    ObjectTypeDefinitionNode,
    InputObjectTypeDefinitionNode,
    SchemaDefinitionNode,
    NonNullTypeNode,
    ListTypeNode,
)
from graphql.utilities import value_from_ast_untyped
from pygraft.utils import patch_indents
from pygraft.exceptions import SchemaError, OperationError
from .base import SCALARS, SCALAR_ANNOTATIONS, UNSET
from .field import Field, Argument, build_fields
from .object import ObjectType
from .input import InputType


class Schema:
    """
    Registry of the types an API exposes, and of its operation roots

    Types are defined while the process starts; `freeze` checks that every
    reference resolves and makes the registry read-only.
    """

    OPERATION_ROOTS = {'query': 'Query', 'mutation': 'Mutation'}

    def __init__(self, description=None):
        self.description = description
        self._types = dict(SCALARS)
        self._roots = {}
        self._frozen = False

    @property
    def frozen(self):
        return self._frozen

    @property
    def types(self):
        return MappingProxyType(self._types)

    @property
    def roots(self):
        return MappingProxyType(self._roots)

    def define_type(self, name, fields, description=None) -> ObjectType:
        return self._register(
            ObjectType(name, build_fields(name, fields), description)
        )

    def define_input(self, name, fields, description=None) -> InputType:
        return self._register(
            InputType(name, build_fields(name, fields), description)
        )

    def define_operation_root(
        self, kind, fields, name=None, description=None
    ) -> ObjectType:
        if kind not in self.OPERATION_ROOTS:
            raise SchemaError(
                f'The valid root type must be {set(self.OPERATION_ROOTS)},'
                f' rather than {kind}'
            )
        if kind in self._roots:
            raise SchemaError(f'The {kind} root is defined twice')
        root = self.define_type(
            name or self.OPERATION_ROOTS[kind], fields, description
        )
        self._roots[kind] = root
        return root

    def resolve_type(self, name):
        return self._types.get(name)

    def root(self, kind) -> ObjectType:
        if kind not in self._roots:
            raise OperationError('This API does not support this operation')
        return self._roots[kind]

    def freeze(self):
        if self._frozen:
            return self
        if 'query' not in self._roots:
            raise SchemaError('The schema must define a query root')
        for tdef in self._types.values():
            if hasattr(tdef, 'validate'):
                tdef.validate(self)
        self._types = MappingProxyType(self._types)
        self._roots = MappingProxyType(self._roots)
        self._frozen = True
        return self

    def _register(self, tdef):
        if self._frozen:
            raise SchemaError(f'Can not define {tdef.name}, schema is frozen')
        if tdef.name in self._types:
            raise SchemaError(f'Type {tdef.name} is defined twice')
        self._types[tdef.name] = tdef
        return tdef

    def __str__(self):
        string = ''
        for tdef in self._types.values():
            if tdef.name in SCALARS:
                continue
            string += (str(tdef) + '\n\n')
        roots = '\n'.join(
            f'{kind}: {root.name}' for kind, root in self._roots.items()
        )
        description = f'"""\n{self.description}\n"""\n' \
            if self.description else ''
        schema = (
            description
            + 'schema '
            + '{\n'
            + f'{patch_indents(roots, indent=1)}'
            + '\n}'
        )
        return string + schema

    @classmethod
    def from_sdl(cls, source, description=None):
        """
        Build a frozen schema from GraphQL SDL, e.g.

            type Query {
              post(id: ID!): Post
            }
        """
        try:
            document = parse(source)
        except GraphQLError as e:
            raise SchemaError(e.message) from e

        root_names = {}
        for definition in document.definitions:
            if isinstance(definition, SchemaDefinitionNode):
                for operation_type in definition.operation_types or ():
                    root_names[operation_type.type.name.value] = \
                        operation_type.operation.value
        if not root_names:
            root_names = {v: k for k, v in cls.OPERATION_ROOTS.items()}

        schema = cls(description)
        for definition in document.definitions:
            if isinstance(definition, SchemaDefinitionNode):
                continue
            name = definition.name.value
            type_description = _description(definition)
            if isinstance(definition, ObjectTypeDefinitionNode):
                fields = _fields_from_ast(definition.fields)
                if name in root_names:
                    schema.define_operation_root(
                        root_names[name], fields, name, type_description
                    )
                else:
                    schema.define_type(name, fields, type_description)
            elif isinstance(definition, InputObjectTypeDefinitionNode):
                schema.define_input(
                    name,
                    _input_fields_from_ast(definition.fields),
                    type_description
                )
            else:
                raise SchemaError(
                    f'{definition.kind} definitions are not supported'
                )
        return schema.freeze()


def annotation_from_ast(node, nonnull=False):
    if isinstance(node, NonNullTypeNode):
        return annotation_from_ast(node.type, nonnull=True)
    if isinstance(node, ListTypeNode):
        annotation = List[annotation_from_ast(node.type)]
    else:
        name = node.name.value
        annotation = SCALAR_ANNOTATIONS.get(name, name)
    return annotation if nonnull else Optional[annotation]


def _description(node):
    return node.description.value if node.description else None


def _default(node):
    if node.default_value is None:
        return UNSET
    return value_from_ast_untyped(node.default_value)


def _fields_from_ast(nodes):
    return [
        Field(
            node.name.value,
            annotation_from_ast(node.type),
            args=[
                Argument(
                    arg.name.value,
                    annotation_from_ast(arg.type),
                    default=_default(arg),
                    description=_description(arg)
                )
                for arg in node.arguments or ()
            ],
            description=_description(node)
        )
        for node in nodes or ()
    ]


def _input_fields_from_ast(nodes):
    return [
        Field(
            node.name.value,
            annotation_from_ast(node.type),
            default=_default(node),
            description=_description(node)
        )
        for node in nodes or ()
    ]
