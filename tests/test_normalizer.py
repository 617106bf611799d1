"""
Tests for the normalizer: OCR confusion table, separator collapsing,
split-time repair and the single-character noise floor.
"""
from crew_schedule import normalize
from crew_schedule.normalizer import apply_confusions


def texts(raw, rules=None):
    return [t.text for t in normalize(raw, rules)]


class TestNormalize:
    def test_empty_input(self):
        assert normalize("") == []
        assert normalize(None) == []
        assert normalize("   \n\t  ") == []

    def test_uppercases_and_keeps_order(self):
        assert texts("1 ke085 icn-jfk 19:30") == ["1", "KE085", "ICN-JFK", "19:30"]

    def test_positions_are_sequential(self):
        tokens = normalize("1 KE085\nICN-JFK")
        assert [t.position for t in tokens] == [0, 1, 2]

    def test_line_breaks_and_pipes_become_separators(self):
        raw = "1 | KE085 || ICN-JFK\r\n19:30\n\n4|ATDO"
        assert texts(raw) == ["1", "KE085", "ICN-JFK", "19:30", "4", "ATDO"]

    def test_noise_floor_keeps_single_digits_only(self):
        assert texts("a B 1 0 . - 7") == ["1", "7"]

    def test_split_time_is_repaired(self):
        assert texts("8 KE082 12 : 00") == ["8", "KE082", "12:00"]
        assert texts("19 :30") == ["19:30"]

    def test_edge_punctuation_stripped(self):
        assert texts("(KE085), ICN-JFK. 12:00-") == ["KE085", "ICN-JFK", "12:00"]

    def test_merged_day_and_status_split(self):
        assert texts("4ATDO 5AL") == ["4", "ATDO", "5", "AL"]

    def test_merged_day_with_unknown_word_kept(self):
        assert texts("31ST") == ["31ST"]


class TestConfusions:
    def test_currency_glyph_in_flight_code(self):
        assert texts("K€085") == ["KE085"]

    def test_airport_misread(self):
        assert texts("1CN-JFK") == ["ICN-JFK"]

    def test_unicode_dashes(self):
        assert texts("ICN–JFK GMP—CJU") == ["ICN-JFK", "GMP-CJU"]

    def test_status_misread(self):
        assert texts("ATD0") == ["ATDO"]

    def test_custom_table(self, rules):
        custom = rules.extended(ocr_confusions={"#": "H"})
        assert apply_confusions("#ND", custom) == "HND"
