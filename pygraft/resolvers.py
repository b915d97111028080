from types import MappingProxyType
from typing import Any, Callable, Dict, Optional, Tuple
from collections.abc import Mapping
from pygraft.exceptions import SchemaError
from pygraft.types import ObjectType
from pygraft.utils import to_camel_case, to_snake_case


Resolver = Callable[..., Any]


class ResolverSet:
    """
    Bindings of (type name, field name) to the function resolving it

    A resolver is called as `resolver(parent, context, **arguments)` where
    arguments use snake_case names, and may be a coroutine function.
    """

    def __init__(self):
        self._bindings: Dict[Tuple[str, str], Resolver] = {}
        self._validated = False

    def bind(self, type_name, field_name, resolver: Resolver):
        if self._validated:
            raise SchemaError(
                f'Can not bind {type_name}.{field_name},'
                f' resolvers are already validated'
            )
        key = (type_name, field_name)
        if key in self._bindings:
            raise SchemaError(f'{type_name}.{field_name} is bound twice')
        self._bindings[key] = resolver
        return resolver

    def field(self, type_name, name=None):
        """
        Mark a function as the resolver of a field
        """
        def decorator(method):
            self.bind(type_name, name or to_camel_case(method.__name__), method)
            return method
        return decorator

    def get(self, type_name, field_name) -> Optional[Resolver]:
        return self._bindings.get((type_name, field_name))

    @property
    def bindings(self):
        return MappingProxyType(self._bindings)

    def validate(self, schema):
        for type_name, field_name in self._bindings:
            tdef = schema.resolve_type(type_name)
            if not isinstance(tdef, ObjectType):
                raise SchemaError(
                    f'Resolver bound to unknown object type {type_name}'
                )
            if field_name not in tdef.fields:
                raise SchemaError(
                    f'Resolver bound to unknown field {type_name}.{field_name}'
                )
        for root in schema.roots.values():
            for field_name in root.fields:
                if (root.name, field_name) not in self._bindings:
                    raise SchemaError(
                        f'No resolver is bound to {root.name}.{field_name}'
                    )
        self._validated = True
        return self

    def __contains__(self, key):
        return key in self._bindings

    def __iter__(self):
        return iter(self._bindings)

    def __len__(self):
        return len(self._bindings)


def default_resolver(parent, field_name):
    """
    Read a same-named property off the parent value
    """
    if parent is None:
        return None
    snake_cases = to_snake_case(field_name)
    if isinstance(parent, Mapping):
        if field_name in parent:
            return parent[field_name]
        return parent.get(snake_cases)
    if hasattr(parent, field_name):
        return getattr(parent, field_name)
    return getattr(parent, snake_cases, None)
