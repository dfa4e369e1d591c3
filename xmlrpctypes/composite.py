# encoding: utf-8
"""
Datatypes built from other datatypes: optional values, arrays, structs and
products (tuples and records, mapped onto structs by field name).

Wherever a datatype is expected, a type descriptor such as ``int`` or
``List[str]`` may be passed instead; it is resolved via the registry.
"""
import dataclasses
import typing

from lxml.builder import E

from xmlrpctypes.core import Datatype, DecodeError, ShapeMismatch, unwrap
from xmlrpctypes.grammar import (
    NIL, ARRAY, DATA, STRUCT, MEMBER, NAME, VALUE, children)

__all__ = (
    'Optional', 'Array', 'Struct', 'Product', 'Record', 'field',
)


def resolve(descriptor):
    from xmlrpctypes.registry import datatype_for
    return datatype_for(descriptor)


def read_members(struct):
    """
    Returns a dict mapping member names to their <value> nodes. Member
    order does not matter, but names have to be unique.
    """
    members = {}
    for member in children(struct):
        if member.tag != MEMBER:
            raise ShapeMismatch(expected='<member>', found='<%s>' % member.tag)
        name = value = None
        for part in children(member):
            if part.tag == NAME and name is None:
                name = part.text or ''
            elif part.tag == VALUE and value is None:
                value = part
            else:
                raise ShapeMismatch('unexpected element in member',
                                    expected='<name> and <value>',
                                    found='<%s>' % part.tag)
        if name is None or value is None:
            raise ShapeMismatch('incomplete member',
                                expected='<name> and <value>',
                                found=name is None and 'no <name>' or 'no <value>')
        if name in members:
            raise ShapeMismatch('duplicate member', expected='unique names',
                                found=repr(name)).located(name)
        members[name] = value
    return members


class Optional(Datatype):
    """``None`` is written as <nil/>, everything else by ``item``."""
    def __init__(self, item):
        self.item = resolve(item)

    def to_xml(self, value):
        if value is None:
            return E(NIL)
        return self.item.to_xml(value)

    def from_xml(self, node):
        tag, element = unwrap(node)
        if tag == NIL:
            return None
        # failures of the item are our failures, no swallowing them
        return self.item.from_xml(node)

    def __repr__(self):
        return 'Optional(%r)' % self.item


class Array(Datatype):
    """
    An ordered sequence of values of the same type. Decoding fails as soon
    as one of the items fails; the error's path tells which one.
    """
    def __init__(self, item, container=list):
        self.item = resolve(item)
        self.container = container

    def to_xml(self, values):
        return E(ARRAY, E(DATA, *[self.item.encode(v) for v in values]))

    def from_xml(self, node):
        tag, element = unwrap(node)
        if tag != ARRAY:
            raise ShapeMismatch(expected='<array>', found='<%s>' % tag)
        subnodes = children(element)
        if len(subnodes) != 1 or subnodes[0].tag != DATA:
            raise ShapeMismatch('array without data', expected='<data>',
                                found=', '.join('<%s>' % n.tag for n in subnodes))
        items = []
        for index, child in enumerate(children(subnodes[0])):
            try:
                items.append(self.item.from_xml(child))
            except DecodeError as e:
                raise e.located(index)
        return self.container(items)

    def __repr__(self):
        return 'Array(%r)' % self.item


class Struct(Datatype):
    """A dict of names to values of the same type."""
    pytype = dict

    def __init__(self, item):
        self.item = resolve(item)

    def to_xml(self, mapping):
        return E(STRUCT, *[E(MEMBER, E(NAME, name), self.item.encode(value))
                           for name, value in mapping.items()])

    def from_xml(self, node):
        tag, element = unwrap(node)
        if tag != STRUCT:
            raise ShapeMismatch(expected='<struct>', found='<%s>' % tag)
        result = {}
        for name, child in read_members(element).items():
            try:
                result[name] = self.item.from_xml(child)
            except DecodeError as e:
                raise e.located(name)
        return result

    def __repr__(self):
        return 'Struct(%r)' % self.item


class Product(Datatype):
    """
    A fixed number of values of different types, written as a <struct>.

    ``fields`` is a list of ``(member name, datatype)`` in declaration order.
    ``unpack(value)`` has to return the field values in that same order, and
    ``build(*values)`` creates a new value from them. Whatever ``build`` raises
    while decoding is reported as a ``ShapeMismatch``.

    Use the ``for_*`` constructors rather than building these by hand; the
    registry calls them (once per type) when it sees a tuple, a dataclass,
    a named tuple or a ``Record``.
    """
    def __init__(self, fields, build, unpack, pytype=None):
        self.fields = [(name, resolve(datatype)) for name, datatype in fields]
        self.build, self.unpack = build, unpack
        self.pytype = pytype

    @property
    def names(self):
        return [name for name, datatype in self.fields]

    def to_xml(self, value):
        values = list(self.unpack(value))
        if len(values) != len(self.fields):
            raise TypeError('%s takes %d values, %d given' % (
                self._label(), len(self.fields), len(values)))
        return E(STRUCT, *[E(MEMBER, E(NAME, name), datatype.encode(v))
                           for (name, datatype), v in zip(self.fields, values)])

    def from_xml(self, node):
        tag, element = unwrap(node)
        if tag != STRUCT:
            raise ShapeMismatch(expected='<struct>', found='<%s>' % tag)
        members = read_members(element)
        values = []
        for name, datatype in self.fields:
            if name not in members:
                raise ShapeMismatch('missing member', expected=repr(name),
                                    found=', '.join(map(repr, sorted(members))) or 'no members'
                                    ).located(name)
            try:
                values.append(datatype.from_xml(members[name]))
            except DecodeError as e:
                raise e.located(name)
        try:
            return self.build(*values)
        except Exception as e:
            raise ShapeMismatch('cannot construct %s: %s' % (self._label(), e)) from e

    def _label(self):
        if self.pytype is not None:
            return self.pytype.__name__
        return 'product'

    def __repr__(self):
        return 'Product(%s, %s)' % (self._label(), self.names)

    @classmethod
    def for_tuple(cls, datatypes):
        """
        Anonymous tuples have no field names, so their members are called
        ``_1``, ``_2`` and so on.
        """
        fields = [('_%d' % (index + 1), datatype)
                  for index, datatype in enumerate(datatypes)]
        return cls(fields, lambda *values: tuple(values), tuple, pytype=tuple)

    @classmethod
    def for_dataclass(cls, klass):
        hints = typing.get_type_hints(klass)
        names = [f.name for f in dataclasses.fields(klass) if f.init]
        fields = [(name, hints[name]) for name in names]
        return cls(fields,
                   lambda *values: klass(**dict(zip(names, values))),
                   lambda value: [getattr(value, name) for name in names],
                   pytype=klass)

    @classmethod
    def for_namedtuple(cls, klass):
        hints = typing.get_type_hints(klass)
        missing = [name for name in klass._fields if name not in hints]
        if missing:
            raise TypeError('%s has no type annotations for %s' % (
                klass.__name__, ', '.join(missing)))
        fields = [(name, hints[name]) for name in klass._fields]
        return cls(fields, klass, tuple, pytype=klass)

    @classmethod
    def for_record(cls, klass):
        opts = klass._meta
        fields = [(opts.member_name(name), descriptor)
                  for name, descriptor in opts.fields]
        names = opts.names
        return cls(fields, klass,
                   lambda value: [getattr(value, name) for name in names],
                   pytype=klass)


class field(object):
    """
    Declares a ``Record`` field by type descriptor, for when there is no
    datatype instance to assign:

        class Page(Record):
            title = String()
            tags = field(List[str])
    """
    def __init__(self, descriptor):
        self.descriptor = descriptor

class RecordOptions(object):
    """
    Holds the fields of a record, in declaration order, and the options of
    its ``Meta`` subclass.
    """
    def __init__(self, fields, options=None):
        self.fields = fields
        self.member_names = dict(getattr(options, 'member_names', None) or {})

    @property
    def names(self):
        return [name for name, descriptor in self.fields]

    def member_name(self, name):
        """The name a field goes by on the wire."""
        return self.member_names.get(name, name)

class RecordMetaclass(type):
    """
    Collects all attributes holding a datatype (or a ``field``) into a
    ``RecordOptions`` instance at ``_meta``. Fields of base records come
    first; redefining one in a child class keeps its position.
    """
    def __new__(cls, name, bases, attrs):
        fields = {}
        member_names = {}
        for base in reversed(bases):
            opts = getattr(base, '_meta', None)
            if isinstance(opts, RecordOptions):
                fields.update(opts.fields)
                member_names.update(opts.member_names)

        for attr, value in attrs.items():
            if isinstance(value, Datatype):
                fields[attr] = value
            elif isinstance(value, field):
                fields[attr] = value.descriptor

        opts = RecordOptions(list(fields.items()), attrs.get('Meta', None))
        member_names.update(opts.member_names)
        opts.member_names = member_names
        attrs['_meta'] = opts
        return type.__new__(cls, name, bases, attrs)

class Record(metaclass=RecordMetaclass):
    """
    Base class for records that travel as a struct:

        class State(Record):
            name = String()
            population = Double()

        State('South Dakota', 835.175)

    Field values can be passed positionally (in declaration order) or by
    name, and all of them are required. Member names on the wire default to
    the attribute names; use ``Meta.member_names`` to change that:

        class Error(Record):
            code = Int()
            class Meta:
                member_names = {'code': 'errorCode'}
    """
    def __init__(self, *args, **kwargs):
        names = self._meta.names
        if len(args) > len(names):
            raise TypeError('%s takes %d values, %d given' % (
                self.__class__.__name__, len(names), len(args)))
        values = dict(zip(names, args))
        for key, value in kwargs.items():
            if key not in names:
                raise TypeError('%s has no field %r' % (
                    self.__class__.__name__, key))
            if key in values:
                raise TypeError('%r given twice' % key)
            values[key] = value
        missing = [n for n in names if n not in values]
        if missing:
            raise TypeError('%s is missing %s' % (
                self.__class__.__name__, ', '.join(missing)))
        for name in names:
            setattr(self, name, values[name])

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, n) == getattr(other, n)
                   for n in self._meta.names)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join(
            '%s=%r' % (n, getattr(self, n)) for n in self._meta.names))
