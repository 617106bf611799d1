"""
Extraction tables are data: they can be extended in code or from a JSON
file without touching the matchers.
"""
import json

import pytest

from crew_schedule import DEFAULT_RULES, ExtractionRules, RestDayEvent, extract, extract_tokens


class TestExtractionRules:
    def test_defaults(self):
        assert DEFAULT_RULES.airport_corrections["CN"] == "ICN"
        assert "ATDO" in DEFAULT_RULES.status_codes
        assert "KE" in DEFAULT_RULES.airline_prefixes

    def test_extended_adds_without_dropping(self, rules):
        extended = rules.extended(airport_corrections={"kx": "kix"}, status_codes=["vac"])

        assert extended.airport_corrections["KX"] == "KIX"
        assert extended.airport_corrections["CN"] == "ICN"
        assert "VAC" in extended.status_codes
        assert "VAC" not in rules.status_codes

    def test_from_json_file(self, tmp_path, config):
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps({"airport_corrections": {"KX": "KIX"}, "status_codes": ["VAC"], "comment": "site A"}),
            encoding="utf-8",
        )

        loaded = ExtractionRules.from_json_file(path)

        assert extract("5 VAC", config, loaded)["2026-01-05"] == RestDayEvent()
        assert extract_tokens(["6", "KX-ICN"], config, loaded)["2026-01-06"].route == ("KIX", "ICN")

    def test_from_json_file_requires_object(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ValueError):
            ExtractionRules.from_json_file(path)

    def test_unknown_status_without_rules(self, config):
        assert len(extract("5 VAC", config)) == 0
