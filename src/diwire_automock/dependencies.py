from __future__ import annotations

import inspect
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, get_type_hints

_SKIPPED_PARAMETER_KINDS = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ConstructorDependency:
    """Represent a dependency key bound to a constructor parameter."""

    provides: Any
    parameter: Parameter


class ConstructorDependenciesExtractor:
    """Extract the injectable constructor dependencies of a class.

    Only required parameters with an annotation count as dependencies;
    parameters with defaults and ``*args``/``**kwargs`` are left alone.
    """

    def extract(self, concrete_type: type[Any]) -> list[ConstructorDependency]:
        """Extract dependencies from the constructor of ``concrete_type``.

        Args:
            concrete_type: Class whose constructor is inspected.

        """
        if concrete_type.__init__ is object.__init__:
            return []
        try:
            signature = inspect.signature(concrete_type)
        except (TypeError, ValueError):
            return []
        annotations = self._resolved_type_hints(concrete_type)

        dependencies: list[ConstructorDependency] = []
        for parameter in signature.parameters.values():
            if parameter.kind in _SKIPPED_PARAMETER_KINDS:
                continue
            if parameter.default is not Parameter.empty:
                continue
            provides = annotations.get(parameter.name, parameter.annotation)
            if provides is Parameter.empty or isinstance(provides, str):
                continue
            dependencies.append(ConstructorDependency(provides=provides, parameter=parameter))
        return dependencies

    def _resolved_type_hints(self, concrete_type: type[Any]) -> dict[str, Any]:
        try:
            return get_type_hints(concrete_type.__init__, include_extras=True)
        except (NameError, TypeError):
            # Unresolvable forward references fall back to raw annotations.
            return {}
