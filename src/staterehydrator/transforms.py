"""
Reversible transforms applied to each state slice.

A write side applies ``in_`` of every transform in registration order
before persisting; rehydration undoes that by applying ``out`` in the
reverse order.
"""

from typing import Any, Callable, Iterable, Optional, Protocol, Sequence, runtime_checkable

TransformStep = Callable[[Any, str], Any]


@runtime_checkable
class Transform(Protocol):
    """Interface every transform exposes to the rehydrator."""

    def out(self, state: Any, key: str) -> Any:
        """Reverse step, run while rehydrating the slice stored under ``key``."""
        ...


class FunctionTransform:
    """
    Transform built from a pair of plain functions.

    Either step may be omitted, in which case it passes the state through.
    Keys outside the transform's own whitelist/blacklist are passed through
    by both steps.
    """

    def __init__(
        self,
        inbound: Optional[TransformStep] = None,
        outbound: Optional[TransformStep] = None,
        whitelist: Optional[Iterable[str]] = None,
        blacklist: Optional[Iterable[str]] = None,
    ):
        self._inbound = inbound
        self._outbound = outbound
        self.whitelist = frozenset(whitelist) if whitelist else None
        self.blacklist = frozenset(blacklist or ())

    def applies_to(self, key: str) -> bool:
        if self.whitelist is not None and key not in self.whitelist:
            return False
        return key not in self.blacklist

    def in_(self, state: Any, key: str) -> Any:
        if self._inbound is None or not self.applies_to(key):
            return state
        return self._inbound(state, key)

    def out(self, state: Any, key: str) -> Any:
        if self._outbound is None or not self.applies_to(key):
            return state
        return self._outbound(state, key)

    def __repr__(self) -> str:
        return f"FunctionTransform(whitelist={self.whitelist}, blacklist={set(self.blacklist)})"


def create_transform(
    inbound: Optional[TransformStep] = None,
    outbound: Optional[TransformStep] = None,
    *,
    whitelist: Optional[Iterable[str]] = None,
    blacklist: Optional[Iterable[str]] = None,
) -> FunctionTransform:
    """
    Create a transform from inbound/outbound functions.

    Args:
        inbound: Called as ``inbound(state, key)`` before persisting
        outbound: Called as ``outbound(state, key)`` while rehydrating
        whitelist: Only transform these keys
        blacklist: Never transform these keys

    Returns:
        A transform usable in ``RehydrateConfig.transforms``
    """
    return FunctionTransform(inbound, outbound, whitelist=whitelist, blacklist=blacklist)


def apply_outbound(transforms: Sequence[Transform], state: Any, key: str) -> Any:
    """Undo ``transforms``, last registered first."""
    for transform in reversed(transforms):
        state = transform.out(state, key)
    return state
