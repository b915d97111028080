import dataclasses
from typing import Dict, Optional
from pygraft.utils import patch_indents
from pygraft.exceptions import SchemaError
from .base import print_type, named_type_name, ScalarType
from .field import Field, FieldableType


@dataclasses.dataclass
class ObjectType(FieldableType):
    name: str
    fields: Dict[str, Field]
    description: Optional[str] = None

    def __str__(self):
        return (
            f'{self.print_description()}'
            + f'type {self.name} '
            + '{\n'
            + f'{patch_indents(self.print_field(), indent=1)}'
            + '\n}'
        )

    def validate(self, schema):
        for _, field in self.fields.items():
            print_type(field.ftype)
            named = schema.resolve_type(named_type_name(field.ftype))
            if named is None:
                raise SchemaError(
                    f'Can not find type {named_type_name(field.ftype)}'
                    f' referenced by {self.name}.{field.name}'
                )
            if not isinstance(named, (ObjectType, ScalarType)):
                raise SchemaError(
                    f'{self.name}.{field.name} must return an object or'
                    f' scalar type, rather than {named.name}'
                )

            for arg in field.args.values():
                print_type(arg.atype)
                named = schema.resolve_type(named_type_name(arg.atype))
                if named is None:
                    raise SchemaError(
                        f'Can not find type {named_type_name(arg.atype)}'
                        f' referenced by {self.name}.{field.name}({arg.name})'
                    )
                if isinstance(named, ObjectType):
                    raise SchemaError(
                        f'Argument {arg.name} of {self.name}.{field.name}'
                        f' must be an input or scalar type, rather than'
                        f' {named.name}'
                    )
