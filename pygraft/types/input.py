import dataclasses
from typing import Any, Dict, Mapping, Optional
from graphql.error import GraphQLError
from graphql.language import print_ast
from graphql.language.ast import (
    NullValueNode,
    ListValueNode,
    ObjectValueNode,
    VariableNode,
)
from pygraft.context import context
from pygraft.exceptions import SchemaError, CoercionError
from pygraft.utils import (
    patch_indents,
    is_optional,
    is_list,
    unwrap_optional,
    to_snake_case
)
from .base import print_type, named_type_name, ScalarType, UNSET
from .field import Field, FieldableType


@dataclasses.dataclass
class InputType(FieldableType):
    name: str
    fields: Dict[str, Field]
    description: Optional[str] = None

    def __post_init__(self):
        self.python_type = dataclasses.make_dataclass(
            self.name,
            [
                (to_snake_case(name), Any, dataclasses.field(default=None))
                for name in self.fields
            ]
        )

    def validate(self, schema):
        attributes = {}
        for name, field in self.fields.items():
            if field.args:
                raise SchemaError(
                    f'Input field {self.name}.{name} can not have arguments'
                )
            print_type(field.ftype)
            named = schema.resolve_type(named_type_name(field.ftype))
            if named is None:
                raise SchemaError(
                    f'Can not find type {named_type_name(field.ftype)}'
                    f' referenced by {self.name}.{name}'
                )
            if not isinstance(named, (InputType, ScalarType)):
                raise SchemaError(
                    f'Field type needs be input or built-in type,'
                    f' rather than {named.name}'
                )
            attribute = to_snake_case(name)
            if attribute in attributes:
                raise SchemaError(
                    f'Input fields {attributes[attribute]} and {name}'
                    f' of {self.name} collide as {attribute}'
                )
            attributes[attribute] = name

    def __str__(self):
        return (
            f'{self.print_description()}'
            + f'input {self.name} '
            + '{\n'
            + f'{patch_indents(self.print_field(), indent=1)}'
            + '\n}'
        )


def load_input(itype, raw, coerce, schema):
    for key in raw:
        if key not in itype.fields:
            raise CoercionError(
                f"Field '{key}' is not defined by type '{itype.name}'."
            )
    data = {}
    for name, field in itype.fields.items():
        value = coerce(raw[name], field.ftype, schema) if name in raw else UNSET
        if value is UNSET:
            if field.has_default:
                value = load_value(field.default, field.ftype, schema)
            elif is_optional(field.ftype):
                value = None
            else:
                raise CoercionError(
                    f"Field '{itype.name}.{name}' of required type"
                    f" '{print_type(field.ftype)}' was not provided."
                )
        data[to_snake_case(name)] = value
    return itype.python_type(**data)


def load_literal_value(node, ptype, schema):
    if isinstance(node, VariableNode):
        return load_variable(node.name.value, ptype, schema)
    if isinstance(node, NullValueNode):
        if not is_optional(ptype):
            raise CoercionError(
                f'Expected value of non-null type {print_type(ptype)},'
                f' found null.'
            )
        return None

    inner = unwrap_optional(ptype)
    if is_list(inner):
        item_type = inner.__args__[0]
        if isinstance(node, ListValueNode):
            items = [
                load_literal_value(value, item_type, schema)
                for value in node.values or ()
            ]
            if any(item is UNSET for item in items) \
               and not is_optional(item_type):
                raise CoercionError(
                    f'Expected value of non-null type {print_type(item_type)},'
                    f' found an undefined variable.'
                )
            return [None if item is UNSET else item for item in items]
        return [load_literal_value(node, item_type, schema)]

    named = schema.resolve_type(named_type_name(inner))
    if isinstance(named, InputType):
        if not isinstance(node, ObjectValueNode):
            raise CoercionError(
                f'Expected value of type {named.name},'
                f' found {print_ast(node)}.'
            )
        return load_input(
            named,
            {field.name.value: field.value for field in node.fields or ()},
            load_literal_value,
            schema
        )
    try:
        return named.parse_literal(node)
    except GraphQLError as e:
        raise CoercionError(e.message) from e


def load_variable(name, ptype, schema):
    current = context.get(None)
    variables = current.variables if current else {}
    if name not in variables:
        return UNSET
    return load_value(variables[name], ptype, schema)


def load_value(value, ptype, schema):
    if value is None:
        if not is_optional(ptype):
            raise CoercionError(
                f'Expected non-nullable type {print_type(ptype)}'
                f' not to be null.'
            )
        return None

    inner = unwrap_optional(ptype)
    if is_list(inner):
        item_type = inner.__args__[0]
        if isinstance(value, (list, tuple)):
            return [load_value(item, item_type, schema) for item in value]
        return [load_value(value, item_type, schema)]

    named = schema.resolve_type(named_type_name(inner))
    if isinstance(named, InputType):
        if not isinstance(value, Mapping):
            raise CoercionError(
                f"Expected type '{named.name}' to be an object."
            )
        return load_input(named, value, load_value, schema)
    try:
        return named.parse_value(value)
    except GraphQLError as e:
        raise CoercionError(e.message) from e
