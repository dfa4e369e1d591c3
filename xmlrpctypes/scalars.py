"""
Datatypes for the scalar XML-RPC types. Each maps one python type onto one
tag (or a small family of synonymous tags).
"""
import base64
import binascii
import datetime
import math
import re

from lxml.builder import E

from xmlrpctypes.core import (
    Datatype, Void, ShapeMismatch, ScalarParseError, unwrap)
from xmlrpctypes.grammar import (
    INT, I4, DOUBLE, BOOLEAN, STRING, DATETIME, BASE64, NIL, DATETIME_FORMAT)

__all__ = (
    'Scalar', 'Int', 'Double', 'Boolean', 'String', 'DateTime', 'Base64',
    'Nil', 'VoidType',
)


class Scalar(Datatype):
    """
    Base class for datatypes that hold text inside a single tag.

    ``tag`` is what we write, ``tags`` everything we accept when reading.
    Child classes implement ``format`` and ``parse``; the latter may raise
    ``ValueError`` (or ``TypeError``) which is reported as a
    ``ScalarParseError``.
    """
    tag = None
    tags = ()

    def format(self, value):
        raise NotImplementedError()

    def parse(self, text):
        raise NotImplementedError()

    def to_xml(self, value):
        return E(self.tag, self.format(value))

    def from_xml(self, node):
        tag, element = unwrap(node)
        if tag not in self.tags:
            raise ShapeMismatch(expected='<%s>' % self.tag, found='<%s>' % tag)
        text = element.text or ''
        try:
            return self.parse(text)
        except (ValueError, TypeError, OverflowError) as e:
            raise ScalarParseError(
                'invalid %s: %s' % (self.tag, e),
                expected='<%s>' % self.tag, found=repr(text))


class Int(Scalar):
    """Reads <i4> as well, but always writes <int>."""
    pytype = int
    tag = INT
    tags = (INT, I4)
    pattern = re.compile(r'^\s*[-+]?[0-9]+\s*$')

    def format(self, value):
        return str(int(value))

    def parse(self, text):
        if not self.pattern.match(text):
            raise ValueError('not an integer')
        return int(text)


class Double(Scalar):
    pytype = float
    tag = DOUBLE
    tags = (DOUBLE,)
    # no nan, no infinity
    pattern = re.compile(r'^\s*[-+]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][-+]?[0-9]+)?\s*$')

    def format(self, value):
        return repr(float(value))

    def parse(self, text):
        if not self.pattern.match(text):
            raise ValueError('not a decimal number')
        value = float(text)
        if math.isinf(value):
            raise ValueError('out of range')
        return value


class Boolean(Scalar):
    pytype = bool
    tag = BOOLEAN
    tags = (BOOLEAN,)

    def format(self, value):
        return value and '1' or '0'

    def parse(self, text):
        if text == '1':
            return True
        if text == '0':
            return False
        raise ValueError('boolean must be 0 or 1')


class String(Scalar):
    """
    Escaping of ``&``, ``<`` and ``>`` is left to lxml. A <value> with just
    text in it counts as a string too (see ``unwrap``).
    """
    pytype = str
    tag = STRING
    tags = (STRING,)

    def format(self, value):
        return value

    def parse(self, text):
        return text


class DateTime(Scalar):
    """
    Whole seconds only: microseconds and any timezone are dropped when
    writing, and values are always read back as naive datetimes.
    """
    pytype = datetime.datetime
    tag = DATETIME
    tags = (DATETIME,)
    pattern = re.compile(
        r'^([0-9]{4})([0-9]{2})([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})$')

    def format(self, value):
        return DATETIME_FORMAT % (value.year, value.month, value.day,
                                  value.hour, value.minute, value.second)

    def parse(self, text):
        match = self.pattern.match(text.strip())
        if not match:
            raise ValueError('expected YYYYMMDDTHH:MM:SS')
        return datetime.datetime(*[int(part) for part in match.groups()])


class Base64(Scalar):
    pytype = bytes
    tag = BASE64
    tags = (BASE64,)

    def format(self, value):
        return base64.b64encode(bytes(value)).decode('ascii')

    def parse(self, text):
        # encoders like to wrap lines
        text = ''.join(text.split())
        try:
            return base64.b64decode(text.encode('ascii'), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise ValueError(str(e))


class Nil(Datatype):
    """``None`` as <nil/>."""
    pytype = type(None)

    def to_xml(self, value):
        return E(NIL)

    def from_xml(self, node):
        tag, element = unwrap(node)
        if tag != NIL:
            raise ShapeMismatch(expected='<nil/>', found='<%s>' % tag)
        return None


class VoidType(Datatype):
    """
    The type of ``Void``, the result of a method that returns nothing. It
    encodes as no <value> at all, and since there is nothing to decode, any
    <value> is a mismatch. The protocol layer special-cases empty <params>.
    """
    pytype = type(Void)
    void = True

    def to_xml(self, value):
        return None

    def from_xml(self, node):
        tag, element = unwrap(node)
        raise ShapeMismatch('void methods return no value',
                            expected='no value', found='<%s>' % tag)
