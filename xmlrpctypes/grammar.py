"""
The XML-RPC tag vocabulary, plus a couple of helpers for walking the
element trees lxml gives us.
"""

from lxml.builder import E

__all__ = (
    'METHOD_CALL', 'METHOD_RESPONSE', 'METHOD_NAME', 'PARAMS', 'PARAM',
    'VALUE', 'FAULT', 'ARRAY', 'DATA', 'STRUCT', 'MEMBER', 'NAME',
    'STRING', 'INT', 'I4', 'DOUBLE', 'BOOLEAN', 'DATETIME', 'BASE64', 'NIL',
    'FAULT_CODE', 'FAULT_STRING',
    'PARSE_ERROR', 'INVALID_XMLRPC', 'INVALID_METHOD_PARAMS',
)

# envelopes
METHOD_CALL = 'methodCall'
METHOD_RESPONSE = 'methodResponse'
METHOD_NAME = 'methodName'
PARAMS = 'params'
PARAM = 'param'
FAULT = 'fault'

# values
VALUE = 'value'
ARRAY = 'array'
DATA = 'data'
STRUCT = 'struct'
MEMBER = 'member'
NAME = 'name'
STRING = 'string'
INT = 'int'
I4 = 'i4'
DOUBLE = 'double'
BOOLEAN = 'boolean'
DATETIME = 'dateTime.iso8601'
BASE64 = 'base64'
NIL = 'nil'

# members of the struct inside a <fault>
FAULT_CODE = 'faultCode'
FAULT_STRING = 'faultString'

# Fault codes from the "specification for fault code interoperability",
# used when we have to report a broken request back to a client.
PARSE_ERROR = -32700
INVALID_XMLRPC = -32600
INVALID_METHOD_PARAMS = -32602

# ISO-8601 "basic" format as used by XML-RPC, e.g. 19980717T14:08:55
DATETIME_FORMAT = '%04d%02d%02dT%02d:%02d:%02d'


def children(node):
    """
    Returns the element children of ``node``, leaving out comments and
    processing instructions (whose ``tag`` is not a string in lxml).
    """
    return [child for child in node if isinstance(child.tag, str)]


def describe(node):
    """Short description of a node for use in error messages."""
    if node is None:
        return 'nothing'
    subnodes = children(node)
    if node.tag == VALUE and not subnodes:
        return 'bare text'
    if node.tag == VALUE and len(subnodes) == 1:
        return '<%s>' % subnodes[0].tag
    return '<%s>' % node.tag


def value_node(typed):
    """Wraps a typed element into a <value>."""
    return E(VALUE, typed)
