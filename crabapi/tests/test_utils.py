"""Test utility functions."""

from crabapi.codegen.utils import (
    RESERVED_WORDS,
    escape_reserved,
    split_words,
    to_kebab_case,
    to_lower_camel_case,
    to_shouty_snake_case,
    to_snake_case,
    to_upper_camel_case,
)


class TestSplitWords:
    """Test heck-compatible word splitting."""

    def test_separators(self):
        """Non-alphanumeric characters separate words."""
        assert split_words('/realm/users-count') == ['realm', 'users', 'count']
        assert split_words('__a__b__') == ['a', 'b']

    def test_lower_to_upper_boundary(self):
        """A lowercase letter followed by an uppercase one starts a new word."""
        assert split_words('widgetsGet') == ['widgets', 'Get']

    def test_acronyms(self):
        """The last capital of an acronym followed by lowercase starts a word."""
        assert split_words('HTTPServer') == ['HTTP', 'Server']
        assert split_words('ABC') == ['ABC']

    def test_digits_stay_attached(self):
        """Digits do not start a new word."""
        assert split_words('oauth2Client') == ['oauth2', 'Client']

    def test_empty(self):
        """Empty input gives no words."""
        assert split_words('') == []
        assert split_words('{}/') == []


class TestCaseConversion:
    """Test the case conversion helpers."""

    def test_snake_case(self):
        """Test snake_case conversion."""
        assert to_snake_case('briefRepresentation') == 'brief_representation'
        assert to_snake_case('user-id') == 'user_id'
        assert to_snake_case('HTTPServer') == 'http_server'
        assert to_snake_case('/realm/users' + 'Get') == 'realm_users_get'

    def test_kebab_case(self):
        """Test kebab-case conversion."""
        assert to_kebab_case('Client Scopes') == 'client-scopes'
        assert to_kebab_case('Users') == 'users'

    def test_shouty_snake_case(self):
        """Test SHOUTY_SNAKE_CASE conversion."""
        assert to_shouty_snake_case('fooBar') == 'FOO_BAR'

    def test_upper_camel_case(self):
        """Test UpperCamelCase conversion."""
        assert to_upper_camel_case('realm_users_get') == 'RealmUsersGet'
        assert to_upper_camel_case('AFFIRMATIVE') == 'Affirmative'

    def test_lower_camel_case(self):
        """Test lowerCamelCase conversion."""
        assert to_lower_camel_case('foo_bar') == 'fooBar'
        assert to_lower_camel_case('fooBar') == 'fooBar'
        assert to_lower_camel_case('') == ''


class TestEscapeReserved:
    """Test escaping of reserved and taken identifiers."""

    def test_keywords(self):
        """Rust keywords get a trailing underscore."""
        assert 'type' in RESERVED_WORDS
        assert escape_reserved('type') == 'type_'
        assert escape_reserved('self') == 'self_'

    def test_plain_names(self):
        """Names that are free are kept."""
        assert escape_reserved('realm') == 'realm'

    def test_taken_names(self):
        """Underscores are appended until the name is free."""
        assert escape_reserved('name', {'name'}) == 'name_'
        assert escape_reserved('self', {'self_'}) == 'self__'
