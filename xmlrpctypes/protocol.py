"""
Request and response envelopes.

Client side:

    >>> encode_request('examples.getStateName', 41)
    >>> decode_response(body, str)

Server side, the mirror image:

    >>> method, result = decode_request(body, List[int])
    >>> encode_response(sum(result.get()))
    >>> encode_fault(Fault(4, 'Too many parameters.'))

Nothing here raises on a document that has the wrong shape; readers return a
``Result`` instead. A bad *descriptor* is still a ``TypeError``, though.
"""
import copy
import logging

from lxml.builder import E
from lxml.etree import XMLParser, XMLSyntaxError, fromstring, tostring

from xmlrpctypes.conf import get_setting
from xmlrpctypes.core import (
    Result, Fault, Void, DecodeError, ShapeMismatch, MalformedFault)
from xmlrpctypes.composite import Product
from xmlrpctypes.grammar import (
    METHOD_CALL, METHOD_RESPONSE, METHOD_NAME, PARAMS, PARAM, FAULT, VALUE,
    FAULT_CODE, FAULT_STRING, PARSE_ERROR, INVALID_XMLRPC, children, describe)
from xmlrpctypes.registry import datatype_for, datatype_for_value
from xmlrpctypes.scalars import Int, String

__all__ = (
    'Request', 'build_request', 'encode_request', 'decode_response',
    'encode_response', 'encode_fault', 'decode_request', 'parse_xml',
)

log = logging.getLogger(__name__)

# The struct inside a <fault>. Always these two members, so it is spelled
# out here rather than derived.
FAULT_DATATYPE = Product(
    [(FAULT_CODE, Int()), (FAULT_STRING, String())],
    Fault, lambda fault: (fault.code, fault.message), pytype=Fault)


def parse_xml(xml):
    """
    Parses ``xml`` (bytes or str) into an element. Entities are not
    resolved. Raises ``ShapeMismatch`` if this is not XML at all.
    """
    # A str has already been decoded, so whatever encoding its declaration
    # names no longer applies to it.
    encoding = None
    if isinstance(xml, str):
        xml, encoding = xml.encode('utf-8'), 'utf-8'
    parser = XMLParser(encoding=encoding, resolve_entities=False,
                       huge_tree=get_setting('XMLRPC_HUGE_TREE'))
    try:
        root = fromstring(xml, parser)
    except (XMLSyntaxError, ValueError) as e:
        raise ShapeMismatch('not an XML document: %s' % e,
                            fault_code=PARSE_ERROR)
    if root is None:
        raise ShapeMismatch('empty document', fault_code=PARSE_ERROR)
    return root


def serialize(element):
    return tostring(element, encoding=get_setting('XMLRPC_ENCODING'),
                    xml_declaration=True)


def _root(xml, tag):
    """Get hold of the root element, whatever form ``xml`` comes in."""
    if isinstance(xml, (bytes, str)):
        root = parse_xml(xml)
    elif hasattr(xml, 'getroot'):
        root = xml.getroot()
    else:
        root = xml
    if root is None or root.tag != tag:
        raise ShapeMismatch('wrong envelope', expected='<%s>' % tag,
                            found=describe(root), fault_code=INVALID_XMLRPC)
    return root


def _datatype(value, datatype):
    if datatype is None:
        return datatype_for_value(value)
    return datatype_for(datatype)


def _params(param):
    # elements can only have a single parent, so each envelope gets a copy
    if param is None:
        return E(PARAMS)
    return E(PARAMS, E(PARAM, copy.deepcopy(param)))


def _read_params(params, datatype):
    """
    Decodes the content of a <params> node: a single <param>, or none at all
    for ``Void``.
    """
    subnodes = children(params)
    for node in subnodes:
        if node.tag != PARAM:
            raise ShapeMismatch('unexpected element in params',
                                expected='<param>', found='<%s>' % node.tag,
                                fault_code=INVALID_XMLRPC)
    if not subnodes:
        if datatype.void:
            return Void
        raise ShapeMismatch('no value returned', expected='one param',
                            found='no params')
    if len(subnodes) > 1:
        raise ShapeMismatch('more than one param', expected='one param',
                            found='%d params' % len(subnodes))
    values = children(subnodes[0])
    if len(values) != 1 or values[0].tag != VALUE:
        raise ShapeMismatch('param without a value', expected='<value>',
                            found=', '.join('<%s>' % v.tag for v in values)
                                  or 'nothing')
    return datatype.from_xml(values[0])


def _read_fault(fault):
    values = children(fault)
    if len(values) != 1 or values[0].tag != VALUE:
        raise MalformedFault('fault without a value', expected='<value>',
                             found=', '.join('<%s>' % v.tag for v in values)
                                   or 'nothing')
    try:
        return FAULT_DATATYPE.from_xml(values[0])
    except DecodeError as e:
        raise MalformedFault('fault is not a {%s, %s} struct' % (
            FAULT_CODE, FAULT_STRING), cause=e)


class Request(object):
    """
    A method call: the method name and the encoded parameter, a <value>
    element (or ``None`` if the parameter is ``Void``).

    Requests don't change after construction; the XML methods return new
    trees each time.
    """
    def __init__(self, method_name, param):
        self._method_name, self._param = method_name, param

    method_name = property(lambda self: self._method_name)
    param = property(lambda self: copy.deepcopy(self._param))

    def to_xml(self):
        return E(METHOD_CALL, E(METHOD_NAME, self._method_name),
                 _params(self._param))

    def to_string(self):
        return serialize(self.to_xml())

    def as_response(self):
        """
        The same parameter as the payload of a <methodResponse>, i.e. what a
        server echoing the call would send back.
        """
        return E(METHOD_RESPONSE, _params(self._param))

    def __repr__(self):
        return '<Request %s>' % self._method_name


def build_request(method_name, value, datatype=None):
    """
    Encodes ``value`` as the sole parameter of a call to ``method_name``.
    Without a ``datatype``, it is inferred from the type of ``value``, which
    works for scalars and records.

    The method name is passed through as is; whether it is valid is for the
    server to decide.
    """
    datatype = _datatype(value, datatype)
    return Request(method_name, datatype.encode(value))


def encode_request(method_name, value, datatype=None):
    """Like ``build_request``, but returns the serialized document."""
    return build_request(method_name, value, datatype).to_string()


def decode_response(xml, datatype):
    """
    Reads a <methodResponse> and decodes its content as ``datatype``.

    The returned ``Result`` holds either the value, the ``Fault`` the server
    sent, or the ``DecodeError`` describing why the response did not fit.
    A <fault> which is not a proper {faultCode, faultString} struct gives a
    ``MalformedFault``.
    """
    datatype = datatype_for(datatype)
    try:
        root = _root(xml, METHOD_RESPONSE)
        subnodes = children(root)
        if len(subnodes) != 1:
            raise ShapeMismatch('response needs exactly one child',
                                expected='<params> or <fault>',
                                found=', '.join('<%s>' % n.tag for n in subnodes)
                                      or 'nothing',
                                fault_code=INVALID_XMLRPC)
        branch = subnodes[0]
        if branch.tag == FAULT:
            result = Result(_read_fault(branch))
        elif branch.tag == PARAMS:
            result = Result(_read_params(branch, datatype))
        else:
            raise ShapeMismatch('unknown response', expected='<params> or <fault>',
                                found='<%s>' % branch.tag,
                                fault_code=INVALID_XMLRPC)
    except DecodeError as e:
        log.debug('cannot read response as %r: %s', datatype, e)
        return Result(e)
    if result.is_fault:
        log.debug('server returned %r', result.fault)
    return result


def encode_response(value, datatype=None):
    """Serializes a successful <methodResponse> carrying ``value``."""
    datatype = _datatype(value, datatype)
    return serialize(E(METHOD_RESPONSE, _params(datatype.encode(value))))


def encode_fault(fault):
    """Serializes a <methodResponse> reporting ``fault``."""
    return serialize(E(METHOD_RESPONSE, E(FAULT, FAULT_DATATYPE.encode(fault))))


def decode_request(xml, datatype):
    """
    Reads a <methodCall>, decoding its parameter as ``datatype``. Returns a
    tuple of the method name and a ``Result``; the name is ``None`` if it
    could not be read. A call without any <params> is a call without
    parameters, which only ``Void`` accepts.
    """
    datatype = datatype_for(datatype)
    method_name = None
    try:
        root = _root(xml, METHOD_CALL)
        subnodes = children(root)
        names = [n for n in subnodes if n.tag == METHOD_NAME]
        params = [n for n in subnodes if n.tag == PARAMS]
        if len(names) != 1 or len(params) > 1 or \
           len(names) + len(params) != len(subnodes):
            raise ShapeMismatch('malformed call',
                                expected='<methodName> and <params>',
                                found=', '.join('<%s>' % n.tag for n in subnodes)
                                      or 'nothing',
                                fault_code=INVALID_XMLRPC)
        method_name = (names[0].text or '').strip()
        if params:
            value = _read_params(params[0], datatype)
        else:
            value = _read_params(E(PARAMS), datatype)
    except DecodeError as e:
        log.debug('cannot read call to %s as %r: %s', method_name, datatype, e)
        return method_name, Result(e)
    return method_name, Result(value)
