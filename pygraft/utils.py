import re
import typing
from typing import ForwardRef


def patch_indents(string, indent=0):
    spaces = '  ' * indent
    return spaces + string.replace('\n', '\n' + spaces)


def is_union(annotation):
    """Returns True if annotation is a typing.Union"""

    annotation_origin = getattr(annotation, "__origin__", None)

    return annotation_origin == typing.Union


def is_optional(annotation):
    annotation_origin = getattr(annotation, "__origin__", None)
    return annotation_origin == typing.Union \
        and len(annotation.__args__) == 2 \
        and annotation.__args__[1] == type(None)  # noqa


def is_list(annotation):
    return getattr(annotation, "__origin__", None) == list


def unwrap_optional(annotation):
    return annotation.__args__[0] if is_optional(annotation) else annotation


def shelling_type(type):
    while is_optional(type) or is_list(type):
        type = type.__args__[0]
    return type


def type_name(annotation):
    """
    Name of a named type reference, `None` for python types
    """
    if isinstance(annotation, ForwardRef):
        return annotation.__forward_arg__
    elif isinstance(annotation, str):
        return annotation
    return None


def to_camel_case(name):
    has_prefix = False
    if name.startswith('__'):
        has_prefix = True
        without_prefix_name = name[2:]
    else:
        without_prefix_name = name
    components = without_prefix_name.split("_")
    res = components[0] + "".join(x.capitalize() if x else "_" for x in components[1:])  # noqa
    return '__' + res if has_prefix else res


seprate_upper_case = re.compile("(.)([A-Z][a-z]+)")
seprate_upper_case_behind_lower_case = re.compile("([a-z0-9])([A-Z])")


def to_snake_case(name):
    has_prefix = False
    if name.startswith('__'):
        has_prefix = True
        without_prefix_name = name[2:]
    else:
        without_prefix_name = name
    s1 = seprate_upper_case.sub(r"\1_\2", without_prefix_name)
    res = seprate_upper_case_behind_lower_case.sub(r"\1_\2", s1).lower()
    return '__' + res if has_prefix else res
