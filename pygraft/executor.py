import asyncio
import logging
from collections.abc import Iterable, Mapping
from inspect import isawaitable
from typing import Any, Dict, List, NamedTuple, Optional
from graphql.error import GraphQLError
from graphql.language import parse
from graphql.language.ast import (
    DocumentNode,
    OperationDefinitionNode,
    OperationType,
    FragmentDefinitionNode,
    FieldNode,
    InlineFragmentNode,
    FragmentSpreadNode,
    BooleanValueNode,
    VariableNode,
)
from graphql.utilities import value_from_ast_untyped
from pygraft.context import ExecutionContext, context as current_context
from pygraft.exceptions import (
    OperationError,
    CoercionError,
    ClassifiedError,
    ExecutionError,
    FieldNotFoundError,
    ArgumentError,
    NonNullError,
)
from pygraft.resolvers import default_resolver
from pygraft.types import (
    InputType,
    ScalarType,
    UNSET,
    annotation_from_ast,
    named_type_name,
    print_type,
    load_literal_value,
    load_value,
)
from pygraft.utils import is_optional, is_list, unwrap_optional, to_snake_case


OPERATION_MAP = {
    OperationType.QUERY: 'query',
    OperationType.MUTATION: 'mutation',
}


class ExecutionResult(NamedTuple):
    data: Optional[Dict[str, Any]]
    errors: List[ExecutionError]


class NullPropagation(Exception):
    """
    A non-null position completed to null, its parent must become null
    """


SKIPPED = object()


def get_operation(document, operation_name=None):
    operations = []
    fragments = {}
    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            operations.append(definition)
        elif isinstance(definition, FragmentDefinitionNode):
            fragments[definition.name.value] = definition

    if not operations:
        raise OperationError('Must provide an operation.')
    if operation_name is None:
        if len(operations) > 1:
            raise OperationError(
                'Must provide operation name'
                ' if query contains multiple operations.'
            )
        return operations[0], fragments
    for operation in operations:
        if operation.name and operation.name.value == operation_name:
            return operation, fragments
    raise OperationError(f"Unknown operation named '{operation_name}'.")


def variable_defaults(operation):
    return {
        definition.variable.name.value:
            value_from_ast_untyped(definition.default_value)
        for definition in operation.variable_definitions or ()
        if definition.default_value is not None
    }


def check_variables(schema, operation, variables):
    """
    Coerce the provided variables against their declared types, returning
    the errors found
    """
    errors = []
    for definition in operation.variable_definitions or ():
        name = definition.variable.name.value
        vtype = annotation_from_ast(definition.type)
        named = schema.resolve_type(named_type_name(vtype))
        if not isinstance(named, (InputType, ScalarType)):
            errors.append(ExecutionError(
                f"Variable '${name}' cannot be non-input type"
                f" '{print_type(vtype)}'.",
                [definition]
            ))
            continue
        if name not in variables:
            if not is_optional(vtype):
                errors.append(ExecutionError(
                    f"Variable '${name}' of required type"
                    f" '{print_type(vtype)}' was not provided.",
                    [definition]
                ))
            continue
        try:
            load_value(variables[name], vtype, schema)
        except CoercionError as e:
            errors.append(ExecutionError(
                f"Variable '${name}' got invalid value: {e}", [definition]
            ))
    return errors


async def execute(
    schema,
    document,
    resolvers,
    context: Optional[ExecutionContext] = None,
    operation_name=None,
    root_value=None
) -> ExecutionResult:
    """
    Execute one operation of a document against a frozen schema

    Errors raised while resolving fields are collected into
    `context.errors`; only a malformed or unsupported operation raises
    `OperationError`.
    """
    if isinstance(document, str):
        try:
            document = parse(document)
        except GraphQLError as e:
            raise OperationError(e.message) from e
    if not isinstance(document, DocumentNode):
        raise OperationError(f'{document!r} is not an operation document')

    if context is None:
        context = ExecutionContext()
    operation, fragments = get_operation(document, operation_name)
    kind = OPERATION_MAP.get(operation.operation)
    if kind is None:
        raise OperationError('This API does not support this operation')
    root_type = schema.root(kind)

    context.variables = {
        **variable_defaults(operation), **(context.variables or {})
    }
    variable_errors = check_variables(schema, operation, context.variables)
    if variable_errors:
        for error in variable_errors:
            context.add_error(error)
        return ExecutionResult(None, context.errors)

    executor = Executor(schema, resolvers, context, fragments)
    token = current_context.set(context)
    try:
        data = await executor.execute_fields(
            root_type,
            root_value,
            [operation.selection_set],
            [],
            serially=kind == 'mutation'
        )
    except NullPropagation:
        data = None
    finally:
        current_context.reset(token)
    return ExecutionResult(data, context.errors)


class Executor:

    def __init__(self, schema, resolvers, context, fragments=None):
        self.schema = schema
        self.resolvers = resolvers
        self.context = context
        self.fragments = fragments or {}

    async def execute_fields(
        self, parent_type, parent_value, selection_sets, path, serially=False
    ):
        fields = self.collect_fields(parent_type, selection_sets, path)
        if serially:
            results = []
            for key, nodes in fields.items():
                results.append(await self.execute_field(
                    parent_type, parent_value, nodes, path + [key]
                ))
        else:
            results = await asyncio.gather(
                *(
                    self.execute_field(
                        parent_type, parent_value, nodes, path + [key]
                    )
                    for key, nodes in fields.items()
                ),
                return_exceptions=True
            )
            self.__raise_first(results)

        return {
            key: result
            for key, result in zip(fields.keys(), results)
            if result is not SKIPPED
        }

    async def execute_field(self, parent_type, parent_value, nodes, path):
        node = nodes[0]
        name = node.name.value
        if name == '__typename':
            return parent_type.name

        field = parent_type.fields.get(name)
        if field is None:
            self.context.add_error(FieldNotFoundError(
                f"Cannot query field '{name}' on type '{parent_type.name}'.",
                nodes,
                path
            ))
            return SKIPPED

        try:
            kwargs = self.__package_args(parent_type, field, node)
        except CoercionError as e:
            self.context.add_error(ArgumentError(str(e), nodes, path))
            return self.__null_for(field.ftype)

        resolver = self.resolvers.get(parent_type.name, name)
        try:
            if resolver is None:
                result = default_resolver(parent_value, name)
            else:
                result = resolver(parent_value, self.context, **kwargs)
            if isawaitable(result):
                result = await result
        except Exception as e:
            self.__handle_error(e, nodes, path)
            return self.__null_for(field.ftype)

        return await self.complete_value(
            field.ftype, nodes, path, result, f'{parent_type.name}.{name}'
        )

    async def complete_value(self, ftype, nodes, path, result, label):
        nullable = is_optional(ftype)
        inner = unwrap_optional(ftype)
        try:
            if result is None:
                if nullable:
                    return None
                self.context.add_error(NonNullError(
                    f'Cannot return null for non-nullable field {label}.',
                    nodes,
                    path
                ))
                raise NullPropagation

            if is_list(inner):
                return await self.__complete_list(
                    inner, nodes, path, result, label
                )

            named = self.schema.resolve_type(named_type_name(inner))
            if isinstance(named, ScalarType):
                try:
                    return named.serialize(result)
                except GraphQLError as e:
                    self.context.add_error(
                        ExecutionError(e.message, nodes, path)
                    )
                    raise NullPropagation

            selection_sets = [
                node.selection_set for node in nodes if node.selection_set
            ]
            if not selection_sets:
                self.context.add_error(ExecutionError(
                    f"Field '{label}' of type '{print_type(ftype)}'"
                    f" must have a selection of subfields.",
                    nodes,
                    path
                ))
                raise NullPropagation
            return await self.execute_fields(
                named, result, selection_sets, path
            )
        except NullPropagation:
            if nullable:
                return None
            raise

    async def __complete_list(self, ltype, nodes, path, result, label):
        if isinstance(result, (str, bytes, Mapping)) \
           or not isinstance(result, Iterable):
            self.context.add_error(ExecutionError(
                f'Expected Iterable, but did not find one for field {label}.',
                nodes,
                path
            ))
            raise NullPropagation
        item_type = ltype.__args__[0]
        completed = await asyncio.gather(
            *(
                self.complete_value(item_type, nodes, path + [index], item, label)
                for index, item in enumerate(result)
            ),
            return_exceptions=True
        )
        self.__raise_first(completed)
        return list(completed)

    def collect_fields(self, parent_type, selection_sets, path, fields=None, visited=None):
        if fields is None:
            fields = {}
        if visited is None:
            visited = set()
        for selection_set in selection_sets:
            for selection in selection_set.selections:
                if not self.__should_include(selection):
                    continue
                if isinstance(selection, FieldNode):
                    key = selection.alias.value if selection.alias \
                        else selection.name.value
                    fields.setdefault(key, []).append(selection)
                elif isinstance(selection, InlineFragmentNode):
                    if not self.__does_fragment_apply(
                        selection.type_condition, parent_type
                    ):
                        continue
                    self.collect_fields(
                        parent_type, [selection.selection_set],
                        path, fields, visited
                    )
                elif isinstance(selection, FragmentSpreadNode):
                    name = selection.name.value
                    if name in visited:
                        continue
                    visited.add(name)
                    fragment = self.fragments.get(name)
                    if fragment is None:
                        self.context.add_error(ExecutionError(
                            f"Unknown fragment '{name}'.", [selection], path
                        ))
                        continue
                    if not self.__does_fragment_apply(
                        fragment.type_condition, parent_type
                    ):
                        continue
                    self.collect_fields(
                        parent_type, [fragment.selection_set],
                        path, fields, visited
                    )
        return fields

    def __should_include(self, node):
        for directive in node.directives or ():
            name = directive.name.value
            if name not in ('skip', 'include'):
                continue
            condition = False
            for arg in directive.arguments or ():
                if arg.name.value != 'if':
                    continue
                if isinstance(arg.value, BooleanValueNode):
                    condition = arg.value.value
                elif isinstance(arg.value, VariableNode):
                    condition = bool(
                        self.context.variables.get(arg.value.name.value)
                    )
            if name == 'skip' and condition:
                return False
            if name == 'include' and not condition:
                return False
        return True

    @staticmethod
    def __does_fragment_apply(type_condition, parent_type):
        if type_condition is None:
            return True
        return type_condition.name.value == parent_type.name

    def __package_args(self, parent_type, field, node):
        kwargs = {}
        provided = {arg.name.value: arg for arg in node.arguments or ()}
        for name in provided:
            if name not in field.args:
                raise CoercionError(
                    f"Unknown argument '{name}' on field"
                    f" '{parent_type.name}.{field.name}'."
                )
        for name, argument in field.args.items():
            value = UNSET
            if name in provided:
                value = load_literal_value(
                    provided[name].value, argument.atype, self.schema
                )
            if value is UNSET:
                if argument.has_default:
                    value = load_value(
                        argument.default, argument.atype, self.schema
                    )
                elif is_optional(argument.atype):
                    continue
                else:
                    raise CoercionError(
                        f"Argument '{name}' of required type"
                        f" '{print_type(argument.atype)}' was not provided."
                    )
            kwargs[to_snake_case(name)] = value
        return kwargs

    def __handle_error(self, e, nodes, path):
        if isinstance(e, ClassifiedError):
            logging.warning(
                '%s at %s: %s', type(e).__name__, '.'.join(map(str, path)), e
            )
        else:
            logging.error(e, exc_info=True)
        self.context.add_error(ExecutionError(
            str(e) or 'An error occurred.', nodes, path, original_error=e
        ))

    @staticmethod
    def __null_for(ftype):
        if is_optional(ftype):
            return None
        raise NullPropagation

    @staticmethod
    def __raise_first(results):
        for result in results:
            if isinstance(result, BaseException):
                raise result
