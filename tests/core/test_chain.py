"""
Tests for the settings source chain.
"""

from tieredsettings.core.chain import SettingsSourceChain
from tieredsettings.core.sources import ConfigDirectorySource, create_source


def constant(value, name=None):
    return create_source(lambda key: value, name)


class TestSettingsSourceChain:
    """Test first-match-wins lookup."""

    def test_first_non_blank_value_wins(self):
        chain = SettingsSourceChain(
            [constant(None), constant(""), constant("  \n"), constant("second"), constant("third")]
        )
        assert chain.get_serialized_setting("Key") == "second"

    def test_stops_at_first_match(self):
        calls = []

        def tracking(key):
            calls.append(key)
            return "late"

        chain = SettingsSourceChain([constant("early"), create_source(tracking)])
        assert chain.get_serialized_setting("Key") == "early"
        assert calls == []

    def test_no_value_anywhere(self):
        chain = SettingsSourceChain([constant(None), constant(" ")])
        assert chain.get_serialized_setting("Key") is None

    def test_empty_chain(self):
        assert SettingsSourceChain([]).get_serialized_setting("Key") is None

    def test_values_are_not_merged(self):
        chain = SettingsSourceChain([constant('{"a": 1}'), constant('{"b": 2}')])
        assert chain.get_serialized_setting("Key") == '{"a": 1}'

    def test_lazy_factory_runs_once(self):
        calls = []

        def build():
            calls.append(1)
            return [constant("value")]

        chain = SettingsSourceChain(build)
        assert not chain.materialized
        assert chain.get_serialized_setting("A") == "value"
        assert chain.get_serialized_setting("B") == "value"
        assert len(chain) == 1
        assert calls == [1]

    def test_directory_sources(self, tmp_path):
        directory = ConfigDirectorySource(tmp_path)
        chain = SettingsSourceChain([constant("x"), directory])
        assert chain.directory_sources == [directory]
        assert list(chain)[1] is directory


class TestAnonymousSource:
    """Test callback-backed sources."""

    def test_name_defaults_to_callable(self):
        def lookup_from_vault(key):
            return None

        source = create_source(lookup_from_vault)
        assert "lookup_from_vault" in source.name

    def test_explicit_name(self):
        assert constant(None, "custom").name == "custom"
