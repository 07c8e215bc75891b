from __future__ import annotations

import inspect
import types
from typing import Annotated, Any, TypeGuard, get_args, get_origin

# CPython type flag that is cleared for classes which cannot be subclassed.
_Py_TPFLAGS_BASETYPE = 1 << 10


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def spec_class_of(key: Any) -> Any:
    """Return the runtime class behind a dependency key.

    ``Annotated[Service, Component("ro")]`` and ``Repo[int]`` both map to their
    runtime origin class. Other keys, unions included, are returned unchanged.

    Args:
        key: Dependency key to unwrap.

    """
    while get_origin(key) is Annotated:
        key = get_args(key)[0]
    origin = get_origin(key)
    if origin is not None and origin is not types.UnionType and is_runtime_class(origin):
        return origin
    return key


def is_final_class(candidate: type[Any]) -> bool:
    """Return true when a class is marked final or cannot be subclassed.

    Args:
        candidate: Runtime class being checked.

    """
    if getattr(candidate, "__final__", False):
        return True
    return not getattr(candidate, "__flags__", _Py_TPFLAGS_BASETYPE) & _Py_TPFLAGS_BASETYPE


def is_protocol_class(candidate: object) -> bool:
    return is_runtime_class(candidate) and bool(getattr(candidate, "_is_protocol", False))


def is_abstraction(candidate: object) -> bool:
    """Return true when a class is an abstraction the auto-mocker should double.

    Abstract base classes with abstract members and ``typing.Protocol`` classes
    qualify. Concrete classes are left to the container.

    Args:
        candidate: Value being checked.

    """
    if not is_runtime_class(candidate):
        return False
    return inspect.isabstract(candidate) or is_protocol_class(candidate)


def describe_key(key: Any) -> str:
    if is_runtime_class(key):
        return key.__qualname__
    return repr(key)


__all__ = [
    "describe_key",
    "is_abstraction",
    "is_final_class",
    "is_protocol_class",
    "is_runtime_class",
    "spec_class_of",
]
