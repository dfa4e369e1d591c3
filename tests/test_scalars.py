"""
Test the scalar datatypes.
"""
import datetime

from shared import *

def test_int():
    """
    Integers are written as <int>, and read from <int> or <i4>.
    """
    assert roundtrip(41) == Result(41)
    assert roundtrip(-7).value == -7
    assert flat(Int().encode(14)) == '<value><int>14</int></value>'

    # <i4> is a synonym, but never written
    assert Int().decode(node('<value><i4>14</i4></value>')).value == 14
    assert Int().decode(node('<value><int>14</int></value>')).value == 14
    assert Int().decode(node('<value><int> +3 </int></value>')).value == 3

    # not a number, or something python's ``int`` would take
    for text in ['4x', '', '1_000', '4.0', '0x10']:
        result = Int().decode(node('<value><int>%s</int></value>' % text))
        assert isinstance(result.error, ScalarParseError)

    # wrong tag
    result = Int().decode(node('<value><string>14</string></value>'))
    assert isinstance(result.error, ShapeMismatch)

def test_double():
    for number in [41.0, 835.175, -0.5, 1e+16, 0.1]:
        assert roundtrip(number).value == number
    assert flat(Double().encode(41.0)) == '<value><double>41.0</double></value>'
    assert Double().decode(node('<value><double>.5</double></value>')).value == 0.5

    # NaN and Infinity are not supported
    for text in ['nan', 'inf', '-Infinity', 'abc', '', '1e999', '-1e999']:
        result = Double().decode(node('<value><double>%s</double></value>' % text))
        assert isinstance(result.error, ScalarParseError)

def test_boolean():
    assert roundtrip(True).value is True
    assert roundtrip(False).value is False
    assert flat(Boolean().encode(True)) == '<value><boolean>1</boolean></value>'
    assert flat(Boolean().encode(False)) == '<value><boolean>0</boolean></value>'

    # only "0" and "1"
    for text in ['true', 'false', '2', ' 1', '']:
        result = Boolean().decode(node('<value><boolean>%s</boolean></value>' % text))
        assert isinstance(result.error, ScalarParseError)

def test_string():
    """
    Strings, including the special characters and the "no tag means string"
    rule.
    """
    assert roundtrip('Hello world!').value == 'Hello world!'
    assert roundtrip('').value == ''
    assert roundtrip('gr\xfc\xdfe').value == 'gr\xfc\xdfe'

    # & and < are escaped, and come back
    message = 'George & Bernard have < than you'
    assert flat(String().encode(message)) == \
        '<value><string>George &amp; Bernard have &lt; than you</string></value>'
    assert roundtrip(message).value == message
    # &gt; is understood as well
    assert String().decode(node('<value><string>a &gt; b</string></value>')).value == 'a > b'

    # a value without a type tag is a string
    assert String().decode(node('<value>Hello World!</value>')).value == 'Hello World!'
    assert String().decode(node('<value></value>')).value == ''
    assert String().decode(node('<value><string/></value>')).value == ''

    # other tags are not
    result = String().decode(node('<value><int>1</int></value>'))
    assert isinstance(result.error, ShapeMismatch)

def test_datetime():
    """
    Dates are written in the basic ISO-8601 format, to the second.
    """
    date = datetime.datetime(1998, 7, 17, 14, 8, 55)
    assert flat(DateTime().encode(date)) == \
        '<value><dateTime.iso8601>19980717T14:08:55</dateTime.iso8601></value>'
    assert roundtrip(date).value == date

    # fractions of a second are dropped
    now = datetime.datetime.now()
    assert roundtrip(now).value == now.replace(microsecond=0)

    # so is the timezone
    aware = datetime.datetime(2020, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
    assert roundtrip(aware).value == datetime.datetime(2020, 1, 2, 3, 4, 5)

    # small years are padded
    assert flat(DateTime().encode(datetime.datetime(33, 1, 1))) == \
        '<value><dateTime.iso8601>00330101T00:00:00</dateTime.iso8601></value>'

    for text in ['1998-07-17T14:08:55', '19980717T14:08', '19981317T14:08:55',
                 '19980717 14:08:55', '']:
        result = DateTime().decode(
            node('<value><dateTime.iso8601>%s</dateTime.iso8601></value>' % text))
        assert isinstance(result.error, ScalarParseError)

def test_base64():
    encoded = b'eW91IGNhbid0IHJlYWQgdGhpcyE='
    assert roundtrip(encoded).value == encoded
    assert roundtrip(b'\x00\xff\x10').value == b'\x00\xff\x10'
    assert roundtrip(b'').value == b''
    assert flat(Base64().encode(b'hi')) == '<value><base64>aGk=</base64></value>'

    # line breaks are fine
    assert Base64().decode(node('<value><base64>aG\n  k=</base64></value>')).value == b'hi'
    # invalid characters or padding are not
    for text in ['!!!!', 'aGk', 'a']:
        result = Base64().decode(node('<value><base64>%s</base64></value>' % text))
        assert isinstance(result.error, ScalarParseError)

def test_nil():
    assert flat(Nil().encode(None)) == '<value><nil/></value>'
    result = Nil().decode(node('<value><nil/></value>'))
    assert result.ok
    assert result.value is None
    assert roundtrip(None) == Result(None)

    result = Nil().decode(node('<value><int>1</int></value>'))
    assert isinstance(result.error, ShapeMismatch)

def test_void():
    """
    ``Void`` is encoded as nothing at all, and no <value> is ever ``Void``.
    """
    assert VoidType().encode(Void) is None
    result = VoidType().decode(node('<value><nil/></value>'))
    assert isinstance(result.error, ShapeMismatch)
    assert not Void
    assert repr(Void) == 'Void'

def test_not_a_value():
    """
    Decoders want a <value>; anything else is a mismatch, not a crash.
    """
    for datatype in [Int(), Double(), Boolean(), String(), DateTime(),
                     Base64(), Nil()]:
        assert isinstance(datatype.decode(node('<int>1</int>')).error,
                          ShapeMismatch)
        assert isinstance(datatype.decode(None).error, ShapeMismatch)
        # a value can only have one child
        result = datatype.decode(node('<value><int>1</int><int>2</int></value>'))
        assert isinstance(result.error, ShapeMismatch)
