from .base import ID, ScalarType, UNSET, print_type, named_type_name
from .field import Field, Argument
from .object import ObjectType
from .input import InputType, load_literal_value, load_value
from .schema import Schema, annotation_from_ast


__all__ = [
    'ID',
    'ScalarType',
    'UNSET',
    'print_type',
    'named_type_name',
    'Field',
    'Argument',
    'ObjectType',
    'InputType',
    'load_literal_value',
    'load_value',
    'Schema',
    'annotation_from_ast'
]
