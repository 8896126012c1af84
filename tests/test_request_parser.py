"""Tests for secrets input parsing and name normalization."""
import pytest

from vault_gate.secrets.domains.errors import SecretRequestError
from vault_gate.secrets.domains.naming import normalize_output_key
from vault_gate.secrets.workflows.request_parser import parse_secrets_input


class TestParseSecretsInput:
    """Test suite for parse_secrets_input."""

    def test_simple_key(self):
        """Test that a key without name derives output and env names."""
        [request] = parse_secrets_input("secret/data/ci npm_token")

        assert request.path == "secret/data/ci"
        assert request.selector == "npm_token"
        assert request.output_var_name == "npm_token"
        assert request.env_var_name == "NPM_TOKEN"
        assert request.use_key_as_name is False

    def test_renamed_key(self):
        """Test that the name after '|' is used verbatim for both names."""
        [request] = parse_secrets_input("secret/data/ci npm_token | NPM_TOKEN")

        assert request.output_var_name == "NPM_TOKEN"
        assert request.env_var_name == "NPM_TOKEN"

    def test_multiple_entries(self):
        """Test that ';' and newlines separate entries and blanks are skipped."""
        requests = parse_secrets_input(
            "secret/data/ci a ;\n  secret/data/ci b | B\n\n; secret/data/other c;"
        )

        assert [(r.path, r.selector) for r in requests] == [
            ("secret/data/ci", "a"),
            ("secret/data/ci", "b"),
            ("secret/data/other", "c"),
        ]

    def test_quoted_selector_unquoted(self):
        """Test that double quotes are stripped from the selector."""
        [request] = parse_secrets_input('secret/data/ci "api-key"')

        assert request.selector == "api-key"
        assert request.env_var_name == "APIKEY"

    def test_dotted_selector(self):
        """Test that a dotted path derives a '__' separated name."""
        [request] = parse_secrets_input("secret/data/ci conn.host")

        assert request.output_var_name == "conn__host"
        assert request.env_var_name == "CONN__HOST"

    def test_wildcard_without_name_uses_keys(self):
        """Test that a bare wildcard names results after their keys."""
        upper, lower = parse_secrets_input("secret/data/app *; secret/data/app **")

        assert upper.use_key_as_name and upper.upper_case_env
        assert lower.use_key_as_name and not lower.upper_case_env
        assert upper.is_wildcard and lower.is_wildcard

    def test_wildcard_with_prefix(self):
        """Test that a named wildcard keeps the name as prefix."""
        [request] = parse_secrets_input("secret/data/app * | APP_")

        assert request.use_key_as_name is False
        assert request.output_var_name == "APP_"
        assert request.env_var_name == "APP_"

    def test_json_selector_requires_name(self):
        """Test that expression selectors need an explicit name."""
        with pytest.raises(SecretRequestError) as exc_info:
            parse_secrets_input("secret/data/ci $uppercase(token)")

        assert "name for the output key" in str(exc_info.value)

        [request] = parse_secrets_input("secret/data/ci $uppercase(token) | TOKEN")
        assert request.selector == "$uppercase(token)"

    def test_filtered_path_requires_name(self):
        """Test that a filter on the first step needs an explicit name, later steps do not."""
        with pytest.raises(SecretRequestError):
            parse_secrets_input("secret/data/ci hosts[0]")

        [request] = parse_secrets_input("secret/data/ci conn.hosts[0]")
        assert request.output_var_name == "conn__hosts0"

    def test_unparseable_selector(self):
        """Test that a selector with a syntax error is reported as input error."""
        with pytest.raises(SecretRequestError) as exc_info:
            parse_secrets_input("secret/data/ci foo[")

        assert "Invalid selector" in str(exc_info.value)

    def test_empty_name_rejected(self):
        """Test that '|' must be followed by a name."""
        with pytest.raises(SecretRequestError) as exc_info:
            parse_secrets_input("secret/data/ci token |")

        assert "provide a value" in str(exc_info.value)

    @pytest.mark.parametrize("entry", ["secret/data/ci", "secret/data/ci a b", "| NAME"])
    def test_path_and_key_required(self, entry):
        """Test that entries need exactly a path and a key."""
        with pytest.raises(SecretRequestError) as exc_info:
            parse_secrets_input(entry)

        assert "valid path and key" in str(exc_info.value)

    def test_empty_input(self):
        assert parse_secrets_input("") == []
        assert parse_secrets_input(" ; \n") == []


class TestNormalizeOutputKey:
    """Test suite for normalize_output_key."""

    @pytest.mark.parametrize("key,expected", [
        ("token", "token"),
        ("api-key", "apikey"),
        ("a.b", "a__b"),
        ("a.b.c", "a__bc"),
        ("weird$name!", "weirdname"),
        ("ключ", "ключ"),
    ])
    def test_normalization(self, key, expected):
        assert normalize_output_key(key) == expected

    def test_upper_case(self):
        assert normalize_output_key("db.pass-word", upper_case=True) == "DB__PASSWORD"
