"""Binding strategy interface and the shape-keyed dispatcher."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from docbind.bindings.context import BindingContext
from docbind.bindings.shapes import ParameterShape, classify_parameter_type
from docbind.exceptions import UnknownBindingShapeError


class BindingStrategy(ABC):
    """Produces the runtime value for one parameter shape."""

    @abstractmethod
    async def bind(self, context: BindingContext, declared_type: Any) -> Any:
        """Build the value handed to the bound parameter."""


class BindingDispatcher:
    """Immutable routing table from parameter shape to strategy."""

    def __init__(self, strategies: Mapping[ParameterShape, BindingStrategy]) -> None:
        self._strategies: Mapping[ParameterShape, BindingStrategy] = MappingProxyType(dict(strategies))

    @classmethod
    def default(cls) -> BindingDispatcher:
        from docbind.bindings.strategies import default_strategies

        return cls(default_strategies())

    @staticmethod
    def classify(declared_type: Any) -> ParameterShape:
        return classify_parameter_type(declared_type)

    def strategy_for(self, shape: ParameterShape) -> BindingStrategy:
        strategy = self._strategies.get(shape)
        if strategy is None:
            raise UnknownBindingShapeError(shape.value, [s.value for s in self.list_shapes()])
        return strategy

    def select(self, declared_type: Any) -> tuple[ParameterShape, BindingStrategy]:
        shape = self.classify(declared_type)
        return shape, self.strategy_for(shape)

    def list_shapes(self) -> list[ParameterShape]:
        return sorted(self._strategies, key=lambda shape: shape.value)
