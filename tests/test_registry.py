"""
Test finding datatypes for type descriptors, and registering new ones.
"""
import datetime
import decimal
import typing
from typing import List, Dict, Tuple, Sequence, Union

from shared import *

class Amount(Scalar):
    """Decimals, sent as strings to keep them exact."""
    pytype = decimal.Decimal
    tag = 'string'
    tags = ('string',)

    def format(self, value):
        return str(value)

    def parse(self, text):
        try:
            return decimal.Decimal(text)
        except decimal.InvalidOperation:
            raise ValueError('not a decimal: %r' % text)

def test_scalars():
    assert isinstance(datatype_for(int), Int)
    assert isinstance(datatype_for(float), Double)
    assert isinstance(datatype_for(bool), Boolean)
    assert isinstance(datatype_for(str), String)
    assert isinstance(datatype_for(bytes), Base64)
    assert isinstance(datatype_for(datetime.datetime), DateTime)
    assert isinstance(datatype_for(None), Nil)
    assert isinstance(datatype_for(type(None)), Nil)
    assert isinstance(datatype_for(type(Void)), VoidType)

    # datatypes are passed through
    datatype = Array(int)
    assert datatype_for(datatype) is datatype

    # bool is not int
    assert isinstance(datatype_for_value(True), Boolean)
    assert isinstance(datatype_for_value(1), Int)
    assert isinstance(datatype_for_value(Void), VoidType)

def test_composites():
    assert isinstance(datatype_for(typing.Optional[int]), Optional)
    assert isinstance(datatype_for(Union[None, str]), Optional)
    assert isinstance(datatype_for(List[int]), Array)
    assert isinstance(datatype_for(Sequence[int]), Array)
    assert isinstance(datatype_for(Tuple[int, ...]), Array)
    assert isinstance(datatype_for(Dict[str, int]), Struct)
    assert isinstance(datatype_for(Tuple[int, str]), Product)
    assert datatype_for(Tuple[int, str]).names == ['_1', '_2']
    assert datatype_for(Tuple[()]).names == []

    # derived datatypes are cached
    assert datatype_for(List[Tuple[int, str]]) is datatype_for(List[Tuple[int, str]])

def test_unknown():
    """
    Things we can't encode are a ``TypeError`` up front.
    """
    class Thing(object): pass
    for descriptor in [Thing, object, list, List, Dict[int, str],
                       Union[int, str], set, [int]]:
        raises(TypeError, datatype_for, descriptor)
    raises(TypeError, datatype_for_value, Thing())
    raises(TypeError, datatype_for_value, {'a': 1})

    # a named tuple needs annotations
    import collections
    raises(TypeError, datatype_for, collections.namedtuple('Pair', 'a b'))

    # registering something that is not a datatype
    raises(TypeError, register, Thing, int)

def test_register():
    """
    Registering a datatype for a type of our own.
    """
    register(decimal.Decimal, Amount())
    price = decimal.Decimal('19.99')
    assert roundtrip(price).value == price
    assert flat(datatype_for(decimal.Decimal).encode(price)) == \
        '<value><string>19.99</string></value>'
    # bare text counts as well, as for any string
    assert Amount().decode(node('<value>0.10</value>')).value == decimal.Decimal('0.10')
    assert isinstance(Amount().decode(node('<value>ten</value>')).error,
                      ScalarParseError)

    # and it is used inside composites too
    prices = {'a': price, 'b': decimal.Decimal('1')}
    assert roundtrip(prices, Dict[str, decimal.Decimal]).value == prices
