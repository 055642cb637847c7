"""Dependency diffing for tracked effects.

The differ answers "why did this effect run": ``None`` means there was no
baseline to compare against (first run), an empty list means the effect ran
again although none of its declared inputs changed.
"""

from typing import Any, List, Optional, Sequence

# Values Python may intern or rebuild freely; for these, equal means same.
_SCALARS = (int, float, complex, str, bytes, bool, type(None))

INITIAL_REASON = "it was initially mounted"
NO_DEPS_CHANGED_REASON = "it re-ran (no deps changed detected)"


def same_value(a: Any, b: Any) -> bool:
    """Identity comparison, with value semantics for immutable scalars.

    ``1000 is 1000`` depends on interpreter caching, so ints, strings and
    friends compare by value. NaN is the same as NaN, like ``Object.is``.
    """
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _SCALARS):
        return False
    if a != a and b != b:  # NaN
        return True
    return a == b


def changed_deps(
    prev: Optional[Sequence[Any]],
    current: Optional[Sequence[Any]],
    names: Optional[Sequence[Optional[str]]],
) -> Optional[List[str]]:
    if prev is None or current is None:
        return None

    changed: List[str] = []
    for i, value in enumerate(current):
        previous = prev[i] if i < len(prev) else _MISSING
        if not same_value(previous, value):
            changed.append(_dep_name(names, i))
    return changed


def describe_reason(changed: Optional[Sequence[str]]) -> str:
    if changed is None:
        return INITIAL_REASON
    if not changed:
        return NO_DEPS_CHANGED_REASON
    return f"{', '.join(changed)} changed"


def _dep_name(names: Optional[Sequence[Optional[str]]], i: int) -> str:
    if names is not None and i < len(names) and names[i]:
        return str(names[i])
    return f"dep[{i}]"


class _Missing:
    def __repr__(self):
        return "<missing>"


_MISSING = _Missing()
