"""Unit tests for Token."""

import pytest

from keystone_di.domain.token import Token


class TestToken:
    """Test cases for Token identity and immutability."""

    def test_exposes_name(self):
        """Test that the name passed to the constructor is readable."""
        token = Token("Logger")
        assert token.name == "Logger"

    def test_same_name_tokens_are_distinct(self):
        """Test that equality is by reference, not by name."""
        first = Token("Logger")
        second = Token("Logger")

        assert first != second
        assert first is not second

    def test_token_equals_itself(self):
        """Test that a token is equal to itself."""
        token = Token("Logger")
        assert token == token

    def test_tokens_as_dict_keys(self):
        """Test that same-name tokens are separate dictionary keys."""
        first = Token("Logger")
        second = Token("Logger")

        mapping = {first: 1, second: 2}

        assert len(mapping) == 2
        assert mapping[first] == 1
        assert mapping[second] == 2

    def test_name_is_read_only(self):
        """Test that the name property cannot be assigned."""
        token = Token("Logger")
        with pytest.raises(AttributeError):
            token.name = "Other"

    def test_attributes_cannot_be_replaced(self):
        """Test that the token cannot be mutated after construction."""
        token = Token("Logger")
        with pytest.raises(AttributeError):
            token._name = "Other"
        assert token.name == "Logger"

    def test_subscripted_construction(self):
        """Test that Token[T](name) builds a plain token."""

        class Logger:
            pass

        token = Token[Logger]("Logger")

        assert isinstance(token, Token)
        assert token.name == "Logger"

    def test_repr_contains_name(self):
        """Test representation of a token."""
        assert repr(Token("Cache")) == "Token('Cache')"
