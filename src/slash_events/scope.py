"""Variable scopes and closures of the script layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict

ClosureBody = Callable[["Scope"], Any]


@dataclass(slots=True)
class Scope:
    """Mapping of variable names to values with an optional parent scope."""

    variables: Dict[str, Any] = field(default_factory=dict)
    parent: "Scope | None" = None

    def let_variable(self, key: str, value: Any) -> None:
        """Bind ``key`` in this scope, shadowing any parent binding."""

        self.variables[key] = value

    def set_variable(self, key: str, value: Any) -> None:
        """Update ``key`` where it is bound, or bind it here."""

        scope: Scope | None = self
        while scope is not None:
            if key in scope.variables:
                scope.variables[key] = value
                return
            scope = scope.parent
        self.variables[key] = value

    def get_variable(self, key: str, default: Any = None) -> Any:
        scope: Scope | None = self
        while scope is not None:
            if key in scope.variables:
                return scope.variables[key]
            scope = scope.parent
        return default

    def has_variable(self, key: str) -> bool:
        scope: Scope | None = self
        while scope is not None:
            if key in scope.variables:
                return True
            scope = scope.parent
        return False

    def copy(self) -> "Scope":
        parent = self.parent.copy() if self.parent is not None else None
        return Scope(variables=dict(self.variables), parent=parent)


@dataclass(slots=True)
class Closure:
    """A unit of script logic bound to the scope it was defined in."""

    body: ClosureBody
    scope: Scope = field(default_factory=Scope)

    def execute(self) -> Any:
        return self.body(self.scope)

    def execute_with(self, scope: Scope) -> Any:
        """Run the closure body against ``scope`` without rebinding the closure."""

        return self.body(scope)
