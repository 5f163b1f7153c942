from __future__ import annotations

import collections.abc
from dataclasses import dataclass
import functools
import inspect
import types
import typing
from typing import Any, Callable, Mapping, Sequence

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_EMPTY = inspect.Parameter.empty


class InvocationError(Exception):
    """Base class for errors detected before a dynamic call is made."""


@dataclass(eq=False)
class NotCallableError(InvocationError):
    value_type: str

    def __str__(self) -> str:
        return f"non-function of type {self.value_type}"


@dataclass(eq=False)
class ArityMismatchError(InvocationError):
    got: int
    want: int
    most: int | None = None
    detail: str | None = None

    def __str__(self) -> str:
        if self.detail:
            return self.detail
        if self.most is None:
            return f"wrong number of args: got {self.got} want at least {self.want}"
        if self.most != self.want:
            return f"wrong number of args: got {self.got} want {self.want} to {self.most}"
        return f"wrong number of args: got {self.got} want {self.want}"


@dataclass(eq=False)
class TypeMismatchError(InvocationError):
    position: int | str
    actual: str
    expected: str

    def __str__(self) -> str:
        return f"arg {self.position} has type {self.actual}; should be {self.expected}"


@dataclass(frozen=True, slots=True)
class InvokeResult:
    value: Any = None
    error: InvocationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class CallShape:
    """
    The parameter layout of a callable as seen by a positional caller.

    `fixed` holds the positional parameters in order, `variadic` the `*args`
    parameter if present. Expected types are resolved once and keyed by
    parameter name.
    """

    fixed: tuple[inspect.Parameter, ...]
    variadic: inspect.Parameter | None
    keyword_only: tuple[inspect.Parameter, ...]
    var_keyword: inspect.Parameter | None
    hints: Mapping[str, Any]

    @property
    def is_variadic(self) -> bool:
        return self.variadic is not None

    def expected_type(self, param: inspect.Parameter) -> Any:
        hint = self.hints.get(param.name, param.annotation)
        return Any if hint is _EMPTY else hint

    def parameter(self, name: str) -> inspect.Parameter | None:
        for param in (*self.fixed, *self.keyword_only):
            if param.name == name:
                return param
        return None


def describe(fn: Callable[..., Any]) -> CallShape | None:
    """Return the call shape of `fn`, or None when it has no introspectable signature."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    params = list(sig.parameters.values())
    return CallShape(
        fixed=tuple(p for p in params if p.kind in _POSITIONAL_KINDS),
        variadic=next((p for p in params if p.kind is inspect.Parameter.VAR_POSITIONAL), None),
        keyword_only=tuple(p for p in params if p.kind is inspect.Parameter.KEYWORD_ONLY),
        var_keyword=next((p for p in params if p.kind is inspect.Parameter.VAR_KEYWORD), None),
        hints=_type_hints(fn),
    )


def check_call(
    fn: Any,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> CallShape | None:
    """
    Validate that `fn(*args, **kwargs)` matches the callable's signature.

    Raises NotCallableError, ArityMismatchError or TypeMismatchError. Returns
    the resolved shape, or None when the callable cannot be introspected and
    is accepted as is.
    """
    if not callable(fn):
        raise NotCallableError(value_type=_type_name(type(fn)))

    shape = describe(fn)
    if shape is None:
        return None

    kwargs = kwargs or {}
    _check_arity(shape, len(args), kwargs)

    for i, value in enumerate(args):
        if i < len(shape.fixed):
            expected = shape.expected_type(shape.fixed[i])
        else:
            assert shape.variadic is not None
            expected = shape.expected_type(shape.variadic)
        _check_value(i, value, expected)

    for name, value in kwargs.items():
        param = shape.parameter(name)
        if param is None or param.kind is inspect.Parameter.POSITIONAL_ONLY:
            assert shape.var_keyword is not None
            param = shape.var_keyword
        _check_value(name, value, shape.expected_type(param))

    return shape


def invoke(
    fn: Any,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> InvokeResult:
    try:
        check_call(fn, args, kwargs)
    except InvocationError as exc:
        return InvokeResult(error=exc)
    return InvokeResult(value=fn(*args, **(kwargs or {})))


class Invoker:
    """Stateless call-with-arguments facility; see `invoke`."""

    def invoke(
        self,
        fn: Any,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> InvokeResult:
        return invoke(fn, args, kwargs)


def _check_arity(shape: CallShape, got: int, kwargs: Mapping[str, Any]) -> None:
    n = len(shape.fixed)

    for name in kwargs:
        param = shape.parameter(name)
        if param is None or param.kind is inspect.Parameter.POSITIONAL_ONLY:
            if shape.var_keyword is None:
                raise ArityMismatchError(got=got, want=n, detail=f"unexpected keyword argument {name!r}")
            continue
        if param in shape.fixed and shape.fixed.index(param) < got:
            raise ArityMismatchError(got=got, want=n, detail=f"multiple values for argument {name!r}")

    # Trailing positional parameters may be left out when they carry a
    # default or are bound by keyword.
    required = n
    while required > 0:
        param = shape.fixed[required - 1]
        if param.default is _EMPTY and param.name not in kwargs:
            break
        required -= 1

    if shape.is_variadic:
        if got < required:
            raise ArityMismatchError(got=got, want=required)
    elif not required <= got <= n:
        raise ArityMismatchError(got=got, want=required, most=n)

    missing = [p.name for p in shape.keyword_only if p.default is _EMPTY and p.name not in kwargs]
    if missing:
        raise ArityMismatchError(got=got, want=required, detail=f"missing keyword argument(s): {', '.join(missing)}")


def _check_value(position: int | str, value: Any, expected: Any) -> None:
    if value is None:
        if not can_be_none(expected):
            raise TypeMismatchError(position=position, actual="None", expected=_type_name(expected))
        return
    if not is_assignable(value, expected):
        raise TypeMismatchError(
            position=position,
            actual=_type_name(type(value)),
            expected=_type_name(expected),
        )


def can_be_none(expected: Any) -> bool:
    """Report whether None is an acceptable value for the annotation `expected`."""
    if expected is Any or expected is object or expected is None or expected is type(None):
        return True
    if isinstance(expected, (str, typing.ForwardRef)):
        return True
    if isinstance(expected, typing.TypeVar):
        if expected.__constraints__:
            return any(can_be_none(c) for c in expected.__constraints__)
        return expected.__bound__ is None or can_be_none(expected.__bound__)

    origin = typing.get_origin(expected)
    args = typing.get_args(expected)
    if origin is typing.Annotated:
        return can_be_none(args[0])
    if origin is typing.Union or origin is types.UnionType:
        return any(can_be_none(a) for a in args)
    if origin is typing.Literal:
        return None in args
    return False


def is_assignable(value: Any, expected: Any) -> bool:
    """Report whether the non-None `value` may be passed where `expected` is annotated."""
    if expected is Any or expected is object:
        return True
    if isinstance(expected, (str, typing.ForwardRef)):
        return True
    if expected is None or expected is type(None):
        return False
    if isinstance(expected, typing.TypeVar):
        if expected.__constraints__:
            return any(is_assignable(value, c) for c in expected.__constraints__)
        return expected.__bound__ is None or is_assignable(value, expected.__bound__)
    if isinstance(expected, typing.NewType):
        return is_assignable(value, expected.__supertype__)

    origin = typing.get_origin(expected)
    args = typing.get_args(expected)
    if origin is typing.Annotated:
        return is_assignable(value, args[0])
    if origin is typing.Union or origin is types.UnionType:
        return any(is_assignable(value, a) for a in args)
    if origin is typing.Literal:
        return any(value == a and type(value) is type(a) for a in args)
    if origin is collections.abc.Callable:
        return callable(value)
    if origin is type:
        if not isinstance(value, type):
            return False
        if not args or args[0] is Any or not isinstance(args[0], type):
            return True
        return issubclass(value, args[0])
    if origin is not None:
        expected = origin

    if expected is float:
        return isinstance(value, (int, float))
    if expected is complex:
        return isinstance(value, (int, float, complex))
    if not isinstance(expected, type):
        return True
    if getattr(expected, "_is_protocol", False) and not getattr(expected, "_is_runtime_protocol", False):
        return True
    try:
        return isinstance(value, expected)
    except TypeError:
        return True


def _type_hints(fn: Callable[..., Any]) -> dict[str, Any]:
    target: Any = fn
    if isinstance(fn, functools.partial):
        target = fn.func
    elif inspect.isclass(fn):
        target = fn.__init__
    elif not (inspect.isfunction(fn) or inspect.ismethod(fn) or inspect.isbuiltin(fn)):
        target = getattr(type(fn), "__call__", fn)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError, SyntaxError):
        # Unresolvable forward references fall back to the raw annotations.
        return {}


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")
