"""Extracts fields addressed by dotted paths.

The command line tool names fields as ``a.b.c`` with a kind such as
``string`` or ``object-array``. Intermediate segments are walked with
`pick_object`, so errors report the same dotted paths as hand-written
accessor chains.
"""

from typing import Any, List, Tuple

from ..core.accessor import Quidquid

KIND_METHODS = {
    "string": "pick_string",
    "number": "pick_number",
    "boolean": "pick_boolean",
    "object": "pick_object",
    "string-array": "pick_string_array",
    "number-array": "pick_number_array",
    "object-array": "pick_object_array",
}

ARRAY_KINDS = ("string-array", "number-array", "object-array")

# Paths that address the accessor's own value.
BODY_PATHS = ("", ".")


def parse_field_spec(spec: str) -> Tuple[str, str, bool]:
    """Parses a "path:kind" field spec.

    A trailing "?" on the kind marks the field as optional, e.g.
    "user.nickname:string?".

    Args:
        spec (str): The field spec.

    Returns:
        Tuple[str, str, bool]: The path, the kind, and whether the field is
        optional.

    Raises:
        ValueError: If the spec has no kind or names an unknown kind.
    """
    path, sep, kind = spec.rpartition(":")
    if not sep:
        raise ValueError(f"Invalid field spec '{spec}'. Expected PATH:KIND.")
    optional = kind.endswith("?")
    kind = kind.rstrip("?")
    if kind not in KIND_METHODS:
        raise ValueError(f"Unknown kind '{kind}'. Expected one of: {', '.join(KIND_METHODS)}")
    return path, kind, optional


def split_path(path: str) -> List[str]:
    if path in BODY_PATHS:
        return []
    segments = path.split(".")
    if any(not s for s in segments):
        raise ValueError(f"Invalid field path '{path}'.")
    return segments


async def extract(accessor: Quidquid, path: str, kind: str, optional: bool = False) -> Any:
    """Extracts the field at `path` from `accessor` as `kind`.

    Args:
        accessor (Quidquid): The root accessor.
        path (str): Dotted field path; "" or "." addresses the whole body,
            which is only allowed for required array kinds.
        kind (str): One of the keys of `KIND_METHODS`.
        optional (bool): Use the optional variants, returning None as soon
            as any segment of the path is absent.

    Returns:
        Any: Whatever the final accessor method returns.

    Raises:
        ValueError: If the path or kind is invalid.
        FieldError: If the field is missing or has the wrong kind.
    """
    if kind not in KIND_METHODS:
        raise ValueError(f"Unknown kind '{kind}'. Expected one of: {', '.join(KIND_METHODS)}")
    method_name = KIND_METHODS[kind]
    segments = split_path(path)

    if not segments:
        if kind not in ARRAY_KINDS or optional:
            raise ValueError("Only required array kinds can read the whole body.")
        return await getattr(accessor, method_name)()

    current = accessor
    for segment in segments[:-1]:
        if optional:
            current = await current.pick_object_optional(segment)
            if current is None:
                return None
        else:
            current = await current.pick_object(segment)

    if optional:
        method_name += "_optional"
    return await getattr(current, method_name)(segments[-1])


def unwrap(result: Any) -> Any:
    """Turns accessors in an extraction result back into plain data."""
    if isinstance(result, Quidquid):
        return result.value
    if isinstance(result, list):
        return [unwrap(item) for item in result]
    return result
