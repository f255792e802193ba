"""
Tests for the preferences schema and validation.
"""
import pytest

from ccprefs.settings.schema import (
    PREFERENCES_SCHEMA,
    SettingDefinition,
    SettingType,
    ValidationResult,
    get_default_value,
    get_setting_description,
    validate_preferences,
)


class TestSettingDefinition:
    """Test SettingDefinition class."""

    def test_bool_validation(self):
        """Only real bools pass a bool definition."""
        setting = SettingDefinition(SettingType.BOOL, default=True)

        assert setting.validate(True)[0] is True
        assert setting.validate(False)[0] is True
        assert setting.validate("true")[0] is False
        assert setting.validate(1)[0] is False
        assert setting.validate(None)[0] is False

    def test_optional_string_validation(self):
        """Optional strings accept None and reject other types."""
        setting = SettingDefinition(SettingType.STRING, optional=True)

        assert setting.validate("value")[0] is True
        assert setting.validate("")[0] is True
        assert setting.validate(None)[0] is True
        assert setting.validate(42)[0] is False
        assert setting.validate(["a"])[0] is False

    def test_check_runs_after_type_check(self):
        """Custom checks see only correctly typed values."""
        seen = []

        def check(value):
            seen.append(value)
            return "bad" if value == "nope" else None

        setting = SettingDefinition(SettingType.STRING, optional=True, check=check)

        assert setting.validate(3)[0] is False
        assert setting.validate(None)[0] is True
        assert setting.validate("nope") == (False, "bad")
        assert setting.validate("fine") == (True, None)
        assert seen == ["nope", "fine"]


class TestValidatePreferences:
    """Test whole-map validation."""

    def test_full_valid_map(self):
        result = validate_preferences({
            'cloudUrl': 'https://mcc.example.com',
            'username': 'alice',
            'savePath': '/home/alice/kube',
            'offline': True,
            'addToNew': False,
        })
        assert result.valid is True
        assert result.message is None
        assert bool(result) is True

    def test_empty_map_is_valid(self):
        assert validate_preferences({}).valid is True

    def test_nulls_accepted_for_optional_fields(self):
        result = validate_preferences({
            'cloudUrl': None,
            'username': None,
            'savePath': None,
        })
        assert result.valid is True

    def test_empty_cloud_url_is_valid(self):
        assert validate_preferences({'cloudUrl': ''}).valid is True

    @pytest.mark.parametrize("url", ["https://mcc.example.com/", "/"])
    def test_trailing_slash_rejected(self, url):
        result = validate_preferences({'cloudUrl': url})
        assert result.valid is False
        assert bool(result) is False
        assert "cloudUrl" in result.message
        assert "slash" in result.message

    def test_wrong_string_type_rejected(self):
        result = validate_preferences({'username': 123})
        assert result.valid is False
        assert result.message.startswith("username:")

    @pytest.mark.parametrize("value", [None, 0, 1, "false"])
    def test_booleans_must_be_bool_when_present(self, value):
        assert validate_preferences({'offline': value}).valid is False
        assert validate_preferences({'addToNew': value}).valid is False

    def test_unknown_keys_do_not_affect_validity(self):
        result = validate_preferences({'offline': False, 'somethingElse': [1, 2]})
        assert result.valid is True

    @pytest.mark.parametrize("candidate", [None, [], "prefs", 42])
    def test_non_mapping_rejected(self, candidate):
        result = validate_preferences(candidate)
        assert result.valid is False
        assert "mapping" in result.message

    def test_validation_does_not_mutate_candidate(self):
        candidate = {'cloudUrl': 'https://x/', 'offline': True, 'extra': {'a': 1}}
        snapshot = {'cloudUrl': 'https://x/', 'offline': True, 'extra': {'a': 1}}
        validate_preferences(candidate)
        assert candidate == snapshot


class TestSchemaHelpers:
    """Test schema lookup helpers."""

    def test_schema_keys_are_closed_set(self):
        assert set(PREFERENCES_SCHEMA) == {
            'cloudUrl', 'username', 'savePath', 'offline', 'addToNew'
        }

    def test_default_values(self):
        assert get_default_value('cloudUrl') is None
        assert get_default_value('offline') is False
        assert get_default_value('addToNew') is True
        assert get_default_value('unknown') is None

    def test_descriptions(self):
        assert "slash" in get_setting_description('cloudUrl')
        assert get_setting_description('unknown') == ""

    def test_result_constructors(self):
        assert ValidationResult.ok() == ValidationResult(True, None)
        assert ValidationResult.invalid("why") == ValidationResult(False, "why")
