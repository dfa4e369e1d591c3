"""
Finds the datatype for a type descriptor: a plain python type, a
``typing`` construct like ``List[int]`` or ``Optional[str]``, a record
class, or a datatype instance, which is returned unchanged.

Scalars are registered up front. Composite descriptors are resolved when
first asked for and then cached, so a record's field list is worked out
once per class.
"""
import collections.abc
import dataclasses
import datetime
import types
import typing

from xmlrpctypes.core import Datatype, Void
from xmlrpctypes.scalars import (
    Int, Double, Boolean, String, DateTime, Base64, Nil, VoidType)
from xmlrpctypes import composite

__all__ = ('register', 'datatype_for', 'datatype_for_value')

_registry = {}
_derived = {}

# ``int | None`` is a types.UnionType on newer pythons
UNIONS = (typing.Union, getattr(types, 'UnionType', typing.Union))
SEQUENCES = (list, collections.abc.Sequence, collections.abc.MutableSequence)
MAPPINGS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def register(pytype, datatype):
    """
    Make ``datatype`` the datatype for ``pytype``. This takes precedence over
    anything the registry would otherwise derive for the type.
    """
    if not isinstance(datatype, Datatype):
        raise TypeError('%r is not a Datatype instance' % (datatype,))
    _registry[pytype] = datatype
    _derived.clear()


def datatype_for(descriptor):
    """
    Returns the datatype for ``descriptor``, or raises ``TypeError`` if
    there is none. Not finding a datatype is a programming error, so unlike
    decoding this does raise.
    """
    if isinstance(descriptor, Datatype):
        return descriptor
    if descriptor is None:
        descriptor = type(None)
    try:
        if descriptor in _registry:
            return _registry[descriptor]
        if descriptor in _derived:
            return _derived[descriptor]
    except TypeError:
        # unhashable, and so certainly not something we know
        raise TypeError('no datatype for %r' % (descriptor,))
    datatype = _derive(descriptor)
    _derived[descriptor] = datatype
    return datatype


def datatype_for_value(value):
    """
    Guess the datatype from the type of ``value``. Containers need their
    item types spelled out, e.g. ``List[int]``, so this only works for
    scalars and records.
    """
    if value is Void:
        return _registry[type(Void)]
    pytype = type(value)
    if pytype in (list, tuple, dict):
        raise TypeError('cannot tell the item type of a %s; pass a datatype '
                        'or a descriptor like List[int]' % pytype.__name__)
    return datatype_for(pytype)


def _derive(descriptor):
    origin = typing.get_origin(descriptor)
    args = typing.get_args(descriptor)

    if origin in UNIONS:
        others = [arg for arg in args if arg is not type(None)]
        if len(others) == 1 and len(others) < len(args):
            return composite.Optional(others[0])
        raise TypeError('only Optional unions are supported, not %r' % (
            descriptor,))

    if origin in SEQUENCES:
        if len(args) != 1:
            raise TypeError('%r needs an item type' % (descriptor,))
        return composite.Array(args[0])

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return composite.Array(args[0], container=tuple)
        # Tuple[()] is the empty tuple
        if args == ((),):
            args = ()
        return composite.Product.for_tuple(args)

    if origin in MAPPINGS:
        if len(args) != 2:
            raise TypeError('%r needs key and value types' % (descriptor,))
        if args[0] is not str:
            raise TypeError('struct member names are strings, %r has %r '
                            'keys' % (descriptor, args[0]))
        return composite.Struct(args[1])

    if isinstance(descriptor, type):
        if issubclass(descriptor, composite.Record):
            return composite.Product.for_record(descriptor)
        if dataclasses.is_dataclass(descriptor):
            return composite.Product.for_dataclass(descriptor)
        if issubclass(descriptor, tuple) and hasattr(descriptor, '_fields'):
            return composite.Product.for_namedtuple(descriptor)

    raise TypeError('no datatype for %r' % (descriptor,))


register(int, Int())
register(float, Double())
register(bool, Boolean())
register(str, String())
register(datetime.datetime, DateTime())
register(bytes, Base64())
register(bytearray, Base64())
register(type(None), Nil())
register(type(Void), VoidType())
