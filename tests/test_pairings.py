"""
Pairing detection: chaining routed flight days into trips away from base.
"""
from crew_schedule import PairingDetector, ScheduleConfig, extract_tokens


class TestPairingDetector:
    def test_round_trip_then_new_trip(self, config):
        schedule = extract_tokens(
            [
                "1", "KE085", "ICN-JFK", "19:30",
                "3", "KE086", "JFK-ICN", "10:00",
                "4", "ATDO",
                "10", "KE001", "ICN-NRT",
            ],
            config,
        )

        pairings = PairingDetector.find_pairings(schedule)

        assert len(pairings) == 2
        first, second = pairings
        assert first == {
            "start_date": "2026-01-01",
            "end_date": "2026-01-03",
            "legs": ["2026-01-01", "2026-01-03"],
            "flight_numbers": ["KE085", "KE086"],
            "base": "ICN",
            "closed": True,
            "layovers": [{"airport": "JFK", "days": 2}],
            "duration_days": 3,
        }
        assert second["legs"] == ["2026-01-10"]
        assert second["closed"] is False
        assert second["layovers"] == []

    def test_gap_breaks_pairing(self, config):
        schedule = extract_tokens(["1", "KE085", "ICN-JFK", "20", "KE086", "JFK-ICN"], config)

        pairings = PairingDetector.find_pairings(schedule, max_gap_days=7)

        assert [p["legs"] for p in pairings] == [["2026-01-01"], ["2026-01-20"]]
        assert [p["closed"] for p in pairings] == [False, False]

    def test_multi_leg_trip(self, config):
        schedule = extract_tokens(
            ["2", "ICN-NRT", "3", "NRT-HNL", "5", "HNL-ICN"],
            config,
        )

        (pairing,) = PairingDetector.find_pairings(schedule)

        assert pairing["legs"] == ["2026-01-02", "2026-01-03", "2026-01-05"]
        assert pairing["closed"] is True
        assert pairing["flight_numbers"] == []
        assert [l["airport"] for l in pairing["layovers"]] == ["NRT", "HNL"]

    def test_flights_without_route_and_rest_days_ignored(self, config):
        schedule = extract_tokens(["1", "KE085", "2", "ATDO"], config)
        assert PairingDetector.find_pairings(schedule) == []

    def test_out_of_range_dates_skipped(self):
        schedule = extract_tokens(["30", "ICN-JFK"], ScheduleConfig(year=2026, month=2))
        assert PairingDetector.find_pairings(schedule) == []
