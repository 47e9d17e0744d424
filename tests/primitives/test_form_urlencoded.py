import pytest

from oauth2_codec.models.errors import MalformedEncodingError
from oauth2_codec.primitives.form_urlencoded import (
    FormURLEncoded,
    decode,
    encode,
    escape,
    unescape,
)

RESERVED_CHARACTERS = ":#[]@!$&'()*+,;="


class TestEscape:
    """Test percent-escaping of keys and values."""

    def test_space_is_percent_encoded_not_plus(self):
        """Test space becomes %20 rather than +."""
        # Act
        escaped = escape(" ")

        # Assert
        assert escaped == "%20"
        assert escaped != "+"

    @pytest.mark.parametrize("character", list(RESERVED_CHARACTERS))
    def test_reserved_characters_are_escaped(self, character):
        """Test every general and sub delimiter is escaped."""
        # Act
        escaped = escape(character)

        # Assert
        assert escaped == f"%{ord(character):02X}"

    def test_question_mark_and_slash_are_left_alone(self):
        """Test a URL value keeps its slashes and question mark."""
        # Arrange
        redirect_uri = "https://client.example.com/cb?tenant=acme"

        # Act
        escaped = escape(redirect_uri)

        # Assert
        assert escaped == "https%3A//client.example.com/cb?tenant%3Dacme"

    def test_unreserved_characters_are_left_alone(self):
        """Test unreserved characters pass through unchanged."""
        # Arrange
        value = "AZaz09-._~"

        # Act & Assert
        assert escape(value) == value

    def test_non_ascii_is_utf8_percent_encoded(self):
        """Test non-ASCII text is escaped as UTF-8 octets."""
        # Act & Assert
        assert escape("é") == "%C3%A9"

    def test_escape_then_unescape_is_lossless(self):
        """Test unescape restores any escaped string."""
        # Arrange
        value = f"scope {RESERVED_CHARACTERS} ünïcødé ☕ / ? %"

        # Act
        restored = unescape(escape(value))

        # Assert
        assert restored == value


class TestUnescape:
    """Test decoding of percent escapes."""

    def test_plus_is_a_literal_plus(self):
        """Test + is not read as a space."""
        # Act & Assert
        assert unescape("a+b") == "a+b"

    def test_lowercase_hex_is_accepted(self):
        """Test lowercase hex digits decode like uppercase ones."""
        # Act & Assert
        assert unescape("%c3%a9") == "é"

    @pytest.mark.parametrize("value", ["%", "%2", "%zz", "abc%g1"])
    def test_broken_percent_escape_fails(self, value):
        """Test a % without two hex digits is malformed."""
        # Act & Assert
        with pytest.raises(MalformedEncodingError):
            unescape(value)

    def test_escaped_octets_must_be_utf8(self):
        """Test an incomplete UTF-8 sequence is malformed."""
        # Act & Assert
        with pytest.raises(MalformedEncodingError):
            unescape("%C3")


class TestEncodeDecode:
    """Test whole-mapping encoding and decoding."""

    def test_round_trip(self):
        """Test decode restores an encoded mapping."""
        # Arrange
        parameters = {
            "grant_type": "client_credentials",
            "scope": "read write",
            "redirect_uri": "https://client.example.com/cb?x/y",
            "client_secret": "s3cr€t:#[]@!$'()*+,;",
            "empty": "",
        }

        # Act
        decoded = decode(encode(parameters))

        # Assert
        assert decoded == parameters

    def test_encoded_pairs_are_joined_with_ampersand(self):
        """Test pairs are key=value joined by &."""
        # Arrange
        parameters = {"a": "1", "b": "two words"}

        # Act
        encoded = encode(parameters)

        # Assert
        assert sorted(encoded.split(b"&")) == [b"a=1", b"b=two%20words"]

    def test_empty_mapping_round_trips(self):
        """Test the empty mapping encodes to empty bytes and back."""
        # Act & Assert
        assert encode({}) == b""
        assert decode(b"") == {}

    def test_decode_accepts_text(self):
        """Test decode takes a query string as well as bytes."""
        # Act & Assert
        assert decode("code=abc&state=xyz") == {"code": "abc", "state": "xyz"}

    @pytest.mark.parametrize(
        "data",
        [
            b"a=1&b",  # component without "="
            b"a=1=2",  # component with two "="
            b"a=1&&b=2",  # empty component
            b"a=%zz",  # broken escape
        ],
    )
    def test_malformed_component_fails_whole_decode(self, data):
        """Test one bad component fails the decode with no partial result."""
        # Act & Assert
        with pytest.raises(MalformedEncodingError):
            decode(data)

    def test_invalid_utf8_fails(self):
        """Test undecodable bytes are malformed."""
        # Act & Assert
        with pytest.raises(MalformedEncodingError):
            decode(b"a=\xff")


class TestFormURLEncoded:
    """Test the FormURLEncoded value object."""

    def test_to_bytes_and_back(self):
        """Test a value survives conversion to bytes."""
        # Arrange
        form = FormURLEncoded({"username": "johndoe", "password": "A3ddj3w"})

        # Act
        restored = FormURLEncoded.from_bytes(form.to_bytes())

        # Assert
        assert restored == form
        assert restored.parameters == {"username": "johndoe", "password": "A3ddj3w"}

    def test_to_query_is_text(self):
        """Test to_query returns a query string."""
        # Arrange
        form = FormURLEncoded({"state": "x y"})

        # Act & Assert
        assert form.to_query() == "state=x%20y"

    def test_from_bytes_propagates_malformed_encoding(self):
        """Test from_bytes raises on malformed data."""
        # Act & Assert
        with pytest.raises(MalformedEncodingError):
            FormURLEncoded.from_bytes(b"no-equals-sign")
