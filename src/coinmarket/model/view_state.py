"""
View-state model.

A tagged union over idle, loading, loaded(data), empty and error(exception).
Instances are frozen; construct them through the classmethods. A loaded state
always carries non-empty data: an empty successful result is ``empty``.
"""

from collections.abc import Sized
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from src.coinmarket.enums import ViewStateKind

T = TypeVar("T")


class ViewState(BaseModel, Generic[T]):
    """What a list or detail screen should currently render."""

    kind: ViewStateKind
    payload: T | None = None
    failure: Exception | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def check_tag(self) -> "ViewState[T]":
        """Enforce that only the active tag carries a value."""
        if self.kind is ViewStateKind.LOADED:
            if self.payload is None:
                raise ValueError("loaded state requires data")
            if isinstance(self.payload, Sized) and len(self.payload) == 0:
                raise ValueError("loaded state requires non-empty data; use empty")
        elif self.payload is not None:
            raise ValueError(f"{self.kind.value} state cannot carry data")

        if self.kind is ViewStateKind.ERROR:
            if self.failure is None:
                raise ValueError("error state requires an exception")
        elif self.failure is not None:
            raise ValueError(f"{self.kind.value} state cannot carry an exception")
        return self

    @classmethod
    def idle(cls) -> "ViewState[Any]":
        return cls(kind=ViewStateKind.IDLE)

    @classmethod
    def loading(cls) -> "ViewState[Any]":
        return cls(kind=ViewStateKind.LOADING)

    @classmethod
    def loaded(cls, data: T) -> "ViewState[T]":
        return cls(kind=ViewStateKind.LOADED, payload=data)

    @classmethod
    def empty(cls) -> "ViewState[Any]":
        return cls(kind=ViewStateKind.EMPTY)

    @classmethod
    def error(cls, failure: Exception) -> "ViewState[Any]":
        return cls(kind=ViewStateKind.ERROR, failure=failure)

    @property
    def data(self) -> T | None:
        """Loaded data, or None for any other tag."""
        return self.payload if self.kind is ViewStateKind.LOADED else None

    @property
    def is_loading(self) -> bool:
        return self.kind is ViewStateKind.LOADING

    @property
    def exception(self) -> Exception | None:
        """Failure carried by an error state."""
        return self.failure if self.kind is ViewStateKind.ERROR else None

    @property
    def debug_description(self) -> str:
        """Compact tag rendering for logs."""
        match self.kind:
            case ViewStateKind.LOADED:
                return f"loaded({self.payload})"
            case ViewStateKind.ERROR:
                return f"error({self.failure})"
            case _:
                return self.kind.value
