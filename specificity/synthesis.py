"""
synthesis.py - Constructor-Based Object Synthesis

When no registration or customization claims a type, the factory builds one
from its constructor. This module discovers the constructors a class offers,
picks the simplest one and compiles a reusable generation function for it.

Algorithm:
---------
1. Reject non-classes, abstract classes and protocols
2. Discover constructor shapes in order: the class call itself, then public
   classmethods whose return annotation is the class
3. Select the shape with the fewest required parameters (first one wins ties)
4. Compile a closure ``(factory) -> instance`` that requests every required
   parameter through ``factory.any`` at call time

Parameters are resolved through the full pipeline, so registrations and
customizations apply to nested types too. Collection-shaped types are
detected here but deliberately not synthesized.

Example Usage:
-------------
    >>> from specificity.synthesis import derive_generation_function
    >>>
    >>> generate = derive_generation_function(Widget)
    >>> widget = generate(factory)   # Widget(<factory.any(int)>)
"""

from __future__ import annotations

import collections.abc
import inspect
import sys
import typing
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from loguru import logger

from .types import (
    ConstructorShape,
    GenerationFunction,
    NoPublicConstructorError,
    ParameterShape,
    UnconstructibleTypeError,
    UnsupportedCollectionError,
    describe_type,
)

if TYPE_CHECKING:
    from .factory import ObjectFactory


_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_SELF = getattr(typing, "Self", None)


# =============================================================================
# TYPE CLASSIFICATION
# =============================================================================

def is_collection_type(type_: Any) -> bool:
    """True for iterable classes and generic aliases such as ``list[int]``."""
    origin = typing.get_origin(type_) or type_
    return isinstance(origin, type) and issubclass(origin, collections.abc.Iterable)


def is_protocol(type_: Any) -> bool:
    return isinstance(type_, type) and bool(getattr(type_, "_is_protocol", False))


_UNRESOLVABLE = (NameError, SyntaxError, TypeError, AttributeError)


def _type_hints(obj: Any) -> Dict[str, Any]:
    """Resolved annotations of `obj`; unresolvable or missing ones are dropped."""
    try:
        return typing.get_type_hints(obj)
    except _UNRESOLVABLE:
        return _type_hints_by_name(obj)


def _annotation_sources(obj: Any) -> List[tuple]:
    """(raw annotations, global namespace) pairs, base classes first."""
    if isinstance(obj, type):
        return [
            (inspect.get_annotations(base), vars(sys.modules.get(base.__module__, object)))
            for base in reversed(obj.__mro__)
        ]
    return [(inspect.get_annotations(obj), getattr(obj, "__globals__", {}))]


def _type_hints_by_name(obj: Any) -> Dict[str, Any]:
    """Resolve annotations one at a time so one bad name only loses itself."""
    hints: Dict[str, Any] = {}
    try:
        sources = _annotation_sources(obj)
    except TypeError:
        return hints

    for annotations, namespace in sources:
        for name, annotation in annotations.items():
            if annotation is None:
                hints[name] = type(None)
                continue
            if not isinstance(annotation, str):
                hints[name] = annotation
                continue
            try:
                hints[name] = eval(annotation, dict(namespace))
            except _UNRESOLVABLE:
                hints.pop(name, None)
    return hints


# =============================================================================
# CONSTRUCTOR DISCOVERY
# =============================================================================

def _required_parameters(
    signature: inspect.Signature,
    hints: Dict[str, Any],
    substitutions: Dict[Any, Any]
) -> tuple:
    parameters = []
    for parameter in signature.parameters.values():
        if parameter.kind in _VARIADIC or parameter.default is not inspect.Parameter.empty:
            continue
        annotation = hints.get(parameter.name, inspect.Parameter.empty)
        annotation = substitutions.get(annotation, annotation)
        parameters.append(ParameterShape(parameter.name, annotation, parameter.kind))
    return tuple(parameters)


def _class_call_shape(cls: type, substitutions: Dict[Any, Any]) -> Optional[ConstructorShape]:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return None

    hints = _type_hints(cls)
    hints.update(_type_hints(cls.__new__))
    hints.update(_type_hints(cls.__init__))
    hints.pop("return", None)

    return ConstructorShape(
        name=cls.__qualname__,
        target=cls,
        parameters=_required_parameters(signature, hints, substitutions),
    )


def _returns_class(func: Any, cls: type) -> bool:
    hints = _type_hints(func)
    if "return" in hints:
        returned = hints["return"]
        return returned is cls or (_SELF is not None and returned is _SELF)

    raw = getattr(func, "__annotations__", {}).get("return")
    return raw in (cls.__name__, cls.__qualname__, "Self", "typing.Self")


def discover_constructors(
    cls: type,
    substitutions: Optional[Dict[Any, Any]] = None
) -> List[ConstructorShape]:
    """
    Enumerate the public ways of constructing `cls`, in discovery order.

    Parameters
    ----------
    cls : type
        The class to inspect.
    substitutions : dict, optional
        Type variables to replace in parameter annotations, used for
        subscripted generics such as ``Box[int]``.

    Returns
    -------
    List[ConstructorShape]
        The class call first (when it has an inspectable signature), then
        public classmethods annotated to return the class.
    """
    substitutions = substitutions or {}
    shapes: List[ConstructorShape] = []

    class_shape = _class_call_shape(cls, substitutions)
    if class_shape is not None:
        shapes.append(class_shape)

    for name, attribute in vars(cls).items():
        if name.startswith("_") or not isinstance(attribute, classmethod):
            continue
        if not _returns_class(attribute.__func__, cls):
            continue

        bound = getattr(cls, name)
        hints = _type_hints(attribute.__func__)
        shapes.append(ConstructorShape(
            name=f"{cls.__qualname__}.{name}",
            target=bound,
            parameters=_required_parameters(inspect.signature(bound), hints, substitutions),
        ))

    return shapes


def select_constructor(shapes: List[ConstructorShape]) -> ConstructorShape:
    """The shape with the fewest required parameters; earliest wins ties."""
    return min(shapes, key=lambda shape: shape.arity)


# =============================================================================
# COMPILATION
# =============================================================================

def compile_generation_function(shape: ConstructorShape) -> GenerationFunction:
    """
    Turn a constructor shape into a reusable ``(factory) -> instance`` closure.

    Raises
    ------
    UnconstructibleTypeError
        If a required parameter has no usable type annotation.
    """
    for parameter in shape.parameters:
        if parameter.annotation is inspect.Parameter.empty:
            message = (
                f"Parameter '{parameter.name}' of {shape.name} has no resolvable "
                f"type annotation; register a generation function for the type instead."
            )
            logger.error(message)
            raise UnconstructibleTypeError(message)

    target = shape.target
    positional = [p.annotation for p in shape.parameters if p.is_positional]
    keywords = [(p.name, p.annotation) for p in shape.parameters if not p.is_positional]

    def generate(factory: "ObjectFactory") -> Any:
        args = [factory.any(annotation) for annotation in positional]
        kwargs = {name: factory.any(annotation) for name, annotation in keywords}
        return target(*args, **kwargs)

    generate.__qualname__ = f"generate[{shape.name}]"
    generate.constructor = shape
    return generate


def derive_generation_function(type_: Any) -> GenerationFunction:
    """
    Derive the generation function for a concrete class.

    Parameters
    ----------
    type_ : Any
        A class, or a subscripted generic class such as ``Box[int]``.

    Raises
    ------
    UnconstructibleTypeError
        For non-classes, abstract classes and protocols.
    NoPublicConstructorError
        If no constructor can be discovered.
    """
    cls = type_
    substitutions: Dict[Any, Any] = {}

    origin = typing.get_origin(type_)
    if isinstance(origin, type):
        cls = origin
        substitutions = dict(zip(getattr(origin, "__parameters__", ()), typing.get_args(type_)))

    if not isinstance(cls, type):
        message = f"Cannot create {describe_type(type_)}: it is not a class."
        logger.error(message)
        raise UnconstructibleTypeError(message)

    if is_protocol(cls) or inspect.isabstract(cls):
        message = f"Cannot create interface or abstract class {describe_type(type_)}."
        logger.error(message)
        raise UnconstructibleTypeError(message)

    shapes = discover_constructors(cls, substitutions)
    if not shapes:
        message = f"No public constructor found for type {describe_type(type_)}."
        logger.error(message)
        raise NoPublicConstructorError(message)

    shape = select_constructor(shapes)
    logger.debug(
        f"Selected constructor {shape.name} ({shape.arity} parameters) "
        f"for {describe_type(type_)} out of {len(shapes)} candidates"
    )
    return compile_generation_function(shape)


def reject_collection(type_: Any) -> UnsupportedCollectionError:
    """Error for collection-shaped types that reach default synthesis."""
    message = (
        f"Cannot create collection type {describe_type(type_)}. Register a "
        f"generation function for it or use any_sequence() explicitly."
    )
    logger.error(message)
    return UnsupportedCollectionError(message)
