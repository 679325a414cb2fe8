"""Classification of chained assertion calls from their declared return types."""

from __future__ import annotations

import inspect
import logging
import sys
import threading
import types
import typing
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from soft_pytest.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class InvocationKind(Enum):
    """How the engine treats a chained call."""

    CHECK = "check"
    NAVIGATION = "navigation"
    TERMINAL = "terminal"


@dataclass
class InvocationRecord:
    """One chained call being dispatched."""

    name: str
    kind: InvocationKind
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        """Call rendered as source-like text, e.g. ``element(0)``."""
        parts = [repr(a) for a in self.args]
        parts.extend(f"{k}={v!r}" for k, v in self.kwargs.items())
        return f"{self.name}({', '.join(parts)})"


_SELF = object()

# keyed by class identity; same-named classes from other modules coexist
_assertion_types: weakref.WeakSet[type] = weakref.WeakSet()
_root_types: List[type] = []
_dispatch_tables: weakref.WeakKeyDictionary[type, Dict[str, InvocationKind]] = weakref.WeakKeyDictionary()
_registry_lock = threading.RLock()


def register_assertion_type(cls: type) -> None:
    """
    Make an assertion class known to the classifier.

    Called for the base class first and from AbstractAssert.__init_subclass__
    for every subclass. The first class registered is the root: any subclass
    of it counts as an assertion type.
    """
    with _registry_lock:
        if not _root_types:
            _root_types.append(cls)
        _assertion_types.add(cls)
        # annotations naming cls may have resolved to terminal before
        _dispatch_tables.clear()


def is_assertion_type(obj: Any) -> bool:
    if not isinstance(obj, type):
        return False
    if _root_types and issubclass(obj, _root_types[0]):
        return True
    return obj in _assertion_types


class InvocationClassifier:
    """
    Decide whether a call is a check, a navigation or a terminal call.

    Rules, in precedence order:
    - check: the declared return type is ``Self``, the class defining the
      member, or the class the call is made on (alone or in a union)
    - navigation: the declared return type is another assertion type
    - terminal: anything else, including a missing annotation
    """

    @classmethod
    def classify(
        cls,
        declared_return: Any,
        enclosing_type: type,
        callable_member: bool = True,
        invoked_type: Optional[type] = None,
    ) -> InvocationKind:
        """
        Classify one member of an assertion class.

        Args:
            declared_return: Return annotation, as an object or a string.
            enclosing_type: Class that defines the member.
            callable_member: False for plain attributes and properties.
            invoked_type: Class the call is made on, if not enclosing_type.

        Returns:
            The InvocationKind for calls to that member.
        """
        if not callable_member:
            return InvocationKind.TERMINAL

        resolved = [cls._resolve(part, enclosing_type) for part in cls._split(declared_return)]
        own_types = [t for t in (enclosing_type, invoked_type) if t is not None]

        if any(r is _SELF or any(r is t for t in own_types) for r in resolved):
            return InvocationKind.CHECK
        if any(is_assertion_type(r) for r in resolved):
            return InvocationKind.NAVIGATION
        return InvocationKind.TERMINAL

    @classmethod
    def dispatch_table(cls, assertion_type: type) -> Dict[str, InvocationKind]:
        """
        Static {method name -> InvocationKind} table for an assertion class.

        Built once per class from the return annotations of its public members.
        """
        if not is_assertion_type(assertion_type):
            raise ConfigurationError(
                f"{assertion_type!r} is not a registered assertion type"
            )

        with _registry_lock:
            cached = _dispatch_tables.get(assertion_type)
            if cached is None:
                cached = _dispatch_tables[assertion_type] = cls._build_table(assertion_type)
            return cached

    @classmethod
    def _build_table(cls, assertion_type: type) -> Dict[str, InvocationKind]:
        table: Dict[str, InvocationKind] = {}
        for name in dir(assertion_type):
            if name.startswith("_"):
                continue
            owner, member = cls._find_member(assertion_type, name)
            if owner is None:
                continue
            table[name] = cls.classify(
                cls._declared_return(member),
                owner,
                callable_member=cls._is_method(member),
                invoked_type=assertion_type,
            )

        logger.debug(
            f"Built dispatch table for {assertion_type.__name__}: "
            f"{sum(k is InvocationKind.CHECK for k in table.values())} checks, "
            f"{sum(k is InvocationKind.NAVIGATION for k in table.values())} navigations"
        )
        return table

    @classmethod
    def declared_target(cls, assertion_type: type, name: str) -> type:
        """
        Assertion type a navigation method declares it returns.

        Falls back to the root registered assertion type when the annotation
        names none.
        """
        owner, member = cls._find_member(assertion_type, name)
        if owner is not None:
            for part in cls._split(cls._declared_return(member)):
                resolved = cls._resolve(part, owner)
                if is_assertion_type(resolved):
                    return resolved
        for klass in reversed(assertion_type.__mro__):
            if is_assertion_type(klass):
                return klass
        return assertion_type

    @staticmethod
    def _find_member(assertion_type: type, name: str) -> Tuple[Optional[type], Any]:
        for klass in assertion_type.__mro__:
            if name in klass.__dict__:
                return klass, klass.__dict__[name]
        return None, None

    @staticmethod
    def _is_method(member: Any) -> bool:
        if isinstance(member, (staticmethod, classmethod)):
            return True
        return inspect.isfunction(member)

    @staticmethod
    def _declared_return(member: Any) -> Any:
        if isinstance(member, (staticmethod, classmethod)):
            member = member.__func__
        annotations = getattr(member, "__annotations__", None) or {}
        return annotations.get("return")

    @classmethod
    def _split(cls, declared: Any) -> List[Any]:
        """Flatten unions and Optional into their members."""
        if declared is None:
            return []
        if isinstance(declared, str):
            text = declared.strip().strip("'\"")
            if text.startswith("Optional[") and text.endswith("]"):
                text = text[len("Optional[") : -1]
            return [part.strip() for part in text.split("|")]
        if isinstance(declared, types.UnionType) or typing.get_origin(declared) is typing.Union:
            parts: List[Any] = []
            for arg in typing.get_args(declared):
                parts.extend(cls._split(arg))
            return parts
        return [declared]

    @staticmethod
    def _resolve(part: Any, enclosing_type: type) -> Any:
        """Turn one annotation part into an object, or _SELF for Self."""
        if part is typing.Self or part in ("Self", "typing.Self"):
            return _SELF
        if not isinstance(part, str):
            return part

        if part in (enclosing_type.__name__, enclosing_type.__qualname__):
            return enclosing_type
        found = _lookup_in_module(enclosing_type.__module__, part)
        if found is not None:
            return found
        return _lookup_registered(part, enclosing_type)


def _lookup_in_module(module_name: str, dotted: str) -> Any:
    """Resolve a dotted name the way the defining module sees it."""
    found: Any = sys.modules.get(module_name)
    for segment in dotted.split("."):
        if found is None:
            return None
        found = getattr(found, segment, None)
    return found


def _lookup_registered(dotted: str, enclosing_type: type) -> Optional[type]:
    """
    Find a registered assertion class by name.

    Used for names the defining module never imported. When several
    registered classes share the name, the one from the enclosing type's
    top-level package wins.
    """
    name = dotted.rsplit(".", 1)[-1]
    with _registry_lock:
        candidates = [c for c in list(_assertion_types) if c.__name__ == name]
    if not candidates:
        return None
    package = enclosing_type.__module__.split(".")[0]
    candidates.sort(key=lambda c: (c.__module__.split(".")[0] != package, c.__module__, c.__qualname__))
    if len(candidates) > 1:
        logger.debug(f"Annotation '{dotted}' matches {len(candidates)} assertion classes, using {candidates[0]!r}")
    return candidates[0]
