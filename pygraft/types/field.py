import json
import dataclasses
from typing import Any, Dict, Mapping, Optional
from pygraft.utils import patch_indents
from pygraft.exceptions import SchemaError
from .base import print_type, UNSET


def _print_description(description):
    return f'"{description}"\n' if description else ''


@dataclasses.dataclass
class Argument:
    name: str
    atype: Any
    default: Any = UNSET
    description: Optional[str] = None

    @property
    def has_default(self):
        return self.default is not UNSET

    def __str__(self):
        literal = f'{self.name}: {print_type(self.atype)}'
        if self.has_default:
            literal += f' = {json.dumps(self.default)}'
        return _print_description(self.description) + literal


@dataclasses.dataclass
class Field:
    name: str
    ftype: Any
    args: Dict[str, Argument] = dataclasses.field(default_factory=dict)
    description: Optional[str] = None
    default: Any = UNSET

    def __post_init__(self):
        self.args = build_arguments(self.name, self.args)

    @property
    def has_default(self):
        return self.default is not UNSET

    def __str__(self):
        if not self.args:
            literal = f'{self.name}: {print_type(self.ftype)}'
        else:
            literal = f'{self.name}' \
                + '(\n' \
                + patch_indents(self.print_args(), indent=1) \
                + f'\n): {print_type(self.ftype)}'
        if self.has_default:
            literal += f' = {json.dumps(self.default)}'
        return _print_description(self.description) + literal

    def print_args(self):
        return '\n'.join(str(arg) for arg in self.args.values())


def build_arguments(field_name, args):
    if isinstance(args, Mapping):
        args = [
            arg if isinstance(arg, Argument) else Argument(name, arg)
            for name, arg in args.items()
        ]
    result = {}
    for arg in args:
        if arg.name in result:
            raise SchemaError(
                f'Argument {arg.name} is declared twice on {field_name}'
            )
        result[arg.name] = arg
    return result


def build_fields(type_name, fields):
    """
    Accept either a mapping of name to annotation / Field, or an iterable
    of Field, and return the ordered field mapping of a type
    """
    if isinstance(fields, Mapping):
        fields = [
            dataclasses.replace(f, name=name) if isinstance(f, Field)
            else Field(name, f)
            for name, f in fields.items()
        ]
    result = {}
    for field in fields:
        if not isinstance(field, Field):
            raise SchemaError(f'{field} is an invalid field type')
        if field.name in result:
            raise SchemaError(
                f'Field {field.name} is declared twice on {type_name}'
            )
        result[field.name] = field
    if not result:
        raise SchemaError(f'{type_name} must declare at least one field')
    return result


class FieldableType:
    name: str
    fields: Dict[str, Field]
    description: Optional[str]

    def print_description(self, indent=0):
        return patch_indents(
            f'"""\n{self.description}\n"""\n' if self.description else '',  # noqa
            indent=indent
        )

    def print_field(self, indent=0):
        literal = ''
        for _, field in self.fields.items():
            literal += f'{field}\n'
        return patch_indents(literal[:-1], indent)
