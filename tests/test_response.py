"""
Test the Django response classes.
"""
from typing import List

from shared import *
from xmlrpctypes.response import APIResponse, XmlRpcResponse

def test_common():
    """
    Common response stuff.
    """

    # Ensure that the http options are carried through to the actual response
    r = XmlRpcResponse('data', http_status=404,
                       http_headers={'X-Custom': 'test'}).get_response()
    assert r.status_code == 404
    assert r['X-Custom'] == 'test'

    # If passed another ``APIResponse`` object, it's values are used
    r1 = APIResponse('data', http_status=404,
                     http_headers={'Location': 'http://google.de'})
    r2 = APIResponse(r1)
    assert r2.data == r1.data
    assert r2.http_status == 404
    assert 'Location' in r2.http_headers

    # A ``Result`` is unwrapped
    assert APIResponse(Result(5)).data == 5
    fault = Fault(1, 'no')
    assert APIResponse(Result(fault)).data is fault

    # Make sure we can always override the http meta data copied from an
    # ``APIResponse``. ``False`` works for removal.
    r2 = APIResponse(r1, http_status=500, http_headers=False)
    assert r2.http_status == 500
    assert not r2.http_headers

    # the base class doesn't know how to format anything
    raises(NotImplementedError, APIResponse('data').get_response)

def test_xmlrpc_response():
    """
    Test the XML-RPC response format.
    """
    def format(data, datatype=None):
        response = XmlRpcResponse(data, datatype=datatype).get_response()
        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/xml')
        return response.content

    assert decode_response(format(5), int).value == 5
    assert decode_response(format('string'), str).value == 'string'
    assert decode_response(format(True), bool).value is True
    assert decode_response(format([1, 2], List[int]), List[int]).value == [1, 2]
    assert decode_response(format(Result(7)), int).value == 7
    assert decode_response(format(Void), VoidType()).value is Void

    # faults, with a 200 status as XML-RPC wants it
    result = decode_response(format(Fault(4, 'Too many parameters.')), int)
    assert result.fault == Fault(4, 'Too many parameters.')

    # decode errors become faults
    method, call = decode_request(encode_request('add', 'x'), int)
    result = decode_response(format(call), int)
    assert result.fault == Fault(-32602, 'Shape Mismatch')
    result = decode_response(format(ShapeMismatch(fault_code=-32700)), int)
    assert result.fault.code == -32700
