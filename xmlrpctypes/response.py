import logging

from django.http import HttpResponse

from xmlrpctypes.core import Result, Fault, DecodeError
from xmlrpctypes.protocol import encode_response, encode_fault

__all__ = (
    'APIResponse', 'XmlRpcResponse',
)

log = logging.getLogger(__name__)


class APIResponse(object):
    """
    Turns the outcome of a method into a Django ``HttpResponse``. Child
    classes implement ``format`` to serialize the data.

    Besides raw data, the constructor accepts a ``Result`` (which is
    unwrapped into its value, fault or error), a ``Fault`` or
    ``DecodeError``, or another ``APIResponse``, whose values are copied.
    HTTP metadata passed directly always overrides what was copied.
    """
    def __init__(self, data, http_status=None, http_headers=None):
        if isinstance(data, APIResponse):
            self.data, self.http_status, self.http_headers = \
                data.data, data.http_status, data.http_headers
        elif isinstance(data, Result):
            self.data, self.http_status, self.http_headers = \
                data.data, None, None
        else:
            self.data, self.http_status, self.http_headers = data, None, None

        if http_status is not None: self.http_status = http_status
        if http_headers is not None: self.http_headers = http_headers

    content_type = None

    def get_response(self):
        response = HttpResponse(self.format(self.data),
                                content_type=self.content_type,
                                status=self.http_status)
        if self.http_headers:
            for key, value in self.http_headers.items():
                response[key] = value
        return response

    def format(self, data):
        """
        Child classes need to provide this method to prepare ``data`` for use
        as the content of a ``HttpResponse``. ``data`` may also be a
        ``Fault`` or ``DecodeError``, which should be formatted as an error
        response.
        """
        raise NotImplementedError()


class XmlRpcResponse(APIResponse):
    """
    Formats a <methodResponse>. Faults are sent as a <fault>; a
    ``DecodeError`` (usually from ``decode_request``) is converted to a
    fault first.

    XML-RPC reports faults with a regular 200 status, so unless told
    otherwise we don't set one.

        method, result = decode_request(request.body, List[int])
        if result.ok:
            result = sum(result.value)
        return XmlRpcResponse(result, datatype=int).get_response()
    """
    content_type = 'text/xml'

    def __init__(self, data, datatype=None, **kwargs):
        self.datatype = datatype
        super(XmlRpcResponse, self).__init__(data, **kwargs)

    def format(self, data):
        if isinstance(data, DecodeError):
            log.warning('answering with a fault: %s', data)
            data = Fault.from_error(data)
        if isinstance(data, Fault):
            return encode_fault(data)
        return encode_response(data, self.datatype)
