# encoding: utf-8
import logging

from xmlrpctypes.conf import get_setting
from xmlrpctypes.grammar import (
    VALUE, STRING, INVALID_METHOD_PARAMS, INVALID_XMLRPC,
    children, describe, value_node)

__all__ = (
    'Datatype', 'Result', 'Void',
    'DecodeError', 'ShapeMismatch', 'ScalarParseError', 'MalformedFault',
    'Fault',
)

log = logging.getLogger(__name__)


class DecodeError(Exception):
    """
    Base class for everything that can go wrong while turning wire nodes
    back into values. Decoders raise these internally; ``Datatype.decode``
    and the protocol readers catch them and hand them out as part of a
    ``Result``, so callers never see them raised unless they ask for it via
    ``Result.get()``.

    ``expected`` and ``found`` describe the mismatch, ``path`` is the list
    of array indices and member names leading from the outermost value to
    the one that failed.
    """
    name = 'Decode Error'
    fault_code = INVALID_METHOD_PARAMS

    def __init__(self, message="", expected=None, found=None, path=None,
                 fault_code=None):
        Exception.__init__(self, message)
        self.message = message
        self.expected, self.found = expected, found
        self.path = list(path or [])
        if fault_code is not None:
            self.fault_code = fault_code

    def located(self, step):
        """
        Prepend ``step`` (an index or a member name) to the path. Composite
        decoders call this when re-raising a failure of one of their items.
        """
        self.path.insert(0, step)
        return self

    def format_path(self):
        parts = []
        for step in self.path:
            if isinstance(step, int):
                parts.append('[%d]' % step)
            else:
                parts.append('.%s' % step)
        return ''.join(parts).lstrip('.')

    def __str__(self):
        text = self.message or self.name
        if self.expected is not None or self.found is not None:
            text = '%s (expected %s, found %s)' % (
                text, self.expected or '?', self.found or '?')
        if self.path:
            text = '%s: %s' % (self.format_path(), text)
        return text

    def __repr__(self):
        return '<%s: %s>' % (self.__class__.__name__, self)

class ShapeMismatch(DecodeError):
    name = 'Shape Mismatch'

class ScalarParseError(DecodeError):
    name = 'Scalar Parse Error'

class MalformedFault(DecodeError):
    """
    The response carried a <fault>, but its content is not the
    {faultCode, faultString} struct. Kept apart from ``Fault`` so a broken
    server does not look like one reporting a legitimate error.
    """
    name = 'Malformed Fault'
    fault_code = INVALID_XMLRPC

    def __init__(self, message="", cause=None, **kwargs):
        DecodeError.__init__(self, message, **kwargs)
        self.cause = cause

    def __str__(self):
        text = DecodeError.__str__(self)
        if self.cause is not None:
            text = '%s: %s' % (text, self.cause)
        return text


class Fault(Exception):
    """
    An error reported by the remote method: an integer ``code`` and a
    ``message``. Both are read-only.

    A fault is a regular outcome of a call, not a codec problem; it is an
    exception only so that ``Result.get()`` can raise it.
    """
    name = 'Fault'

    def __init__(self, code, message=""):
        Exception.__init__(self, code, message)
        self._code, self._message = code, message

    code = property(lambda self: self._code)
    message = property(lambda self: self._message)

    @classmethod
    def from_error(cls, error):
        """
        Build the fault a server should answer with when it failed to decode
        a request. Details are only included if ``DEBUG`` is enabled.
        """
        if get_setting('DEBUG'):
            message = '%s: %s' % (error.name, error)
        else:
            message = error.name
        return cls(error.fault_code, message)

    def __eq__(self, other):
        if not isinstance(other, Fault):
            return NotImplemented
        return (self.code, self.message) == (other.code, other.message)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.code, self.message))

    def __str__(self):
        return '%s %s: %s' % (self.name, self.code, self.message)

    def __repr__(self):
        return 'Fault(%r, %r)' % (self.code, self.message)


class _Void(object):
    """
    The value of a response without any params. There is exactly one
    instance, ``Void``.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'Void'

Void = _Void()


class Result(object):
    """
    Outcome of a decode: either a value, a ``Fault`` (only ever produced
    for a response envelope), or a ``DecodeError``.

    Like the response classes, the constructor takes whatever data there is
    and figures out which case it is:

        Result(41)                          # ok
        Result(Fault(4, 'Too many params')) # fault
        Result(ShapeMismatch())             # error

    Passing another ``Result`` clones it.
    """
    def __init__(self, data):
        if isinstance(data, Result):
            data = data.data
        self.data = data

    @property
    def ok(self):
        return not isinstance(self.data, (Fault, DecodeError))

    @property
    def is_fault(self):
        return isinstance(self.data, Fault)

    @property
    def is_error(self):
        return isinstance(self.data, DecodeError)

    @property
    def value(self):
        return self.data if self.ok else None

    @property
    def fault(self):
        return self.data if self.is_fault else None

    @property
    def error(self):
        return self.data if self.is_error else None

    def get(self):
        """Return the value, or raise the fault or error."""
        if not self.ok:
            raise self.data
        return self.data

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return type(self.data) is type(other.data) and self.data == other.data

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        if self.ok:
            return 'Result(%r)' % (self.data,)
        return 'Result(<%s>)' % self.data.__class__.__name__


def unwrap(node):
    """
    Returns ``(tag, element)`` for the typed content of a <value> node.

    A <value> without a child element holds a string; we report that as
    ``STRING`` with the <value> itself as the element, so the text can be
    read from it the same way as from a <string>.
    """
    if node is None or node.tag != VALUE:
        raise ShapeMismatch('not a value', expected='<value>',
                            found=describe(node))
    subnodes = children(node)
    if not subnodes:
        return STRING, node
    if len(subnodes) > 1:
        raise ShapeMismatch('value with more than one child',
                            expected='a single typed child',
                            found='%d children' % len(subnodes))
    return subnodes[0].tag, subnodes[0]


class Datatype(object):
    """
    Pairs the encoding and decoding of one type of value.

    ``encode`` turns a value into a <value> element and never fails for a
    value of the right type. ``decode`` takes a <value> element and always
    returns a ``Result``.

    Child classes implement ``to_xml``, returning the typed element that
    goes inside the <value> (or ``None`` for nothing at all), and
    ``from_xml``, which receives the <value> node and raises a
    ``DecodeError`` if it cannot handle it.
    """

    # the python type this datatype handles, if there is a single one
    pytype = None
    # only ``VoidType`` may be encoded as nothing
    void = False

    def to_xml(self, value):
        raise NotImplementedError()

    def from_xml(self, node):
        raise NotImplementedError()

    def encode(self, value):
        typed = self.to_xml(value)
        if typed is None:
            return None
        return value_node(typed)

    def decode(self, node):
        try:
            value = self.from_xml(node)
        except DecodeError as e:
            log.debug('%r failed to decode %s: %s', self, describe(node), e)
            return Result(e)
        return Result(value)

    def __repr__(self):
        return '%s()' % self.__class__.__name__
