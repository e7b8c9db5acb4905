"""
End-to-end tests for the command line entry point.
"""

import json

import pytest

from cli import build_parser, main


@pytest.fixture
def input_files(tmp_path, regions_json, locations_json):
    regions_path = tmp_path / "regions.json"
    locations_path = tmp_path / "locations.json"
    regions_path.write_text(json.dumps(regions_json), encoding="utf-8")
    locations_path.write_text(json.dumps(locations_json), encoding="utf-8")
    return regions_path, locations_path, tmp_path / "results.json"


class TestCliMain:
    """Full runs from JSON inputs to a results file."""

    def test_writes_results(self, input_files):
        regions_path, locations_path, results_path = input_files

        exit_code = main([str(regions_path), str(locations_path), str(results_path)])

        assert exit_code == 0
        assert json.loads(results_path.read_text(encoding="utf-8")) == [
            {"region": "R", "matched_locations": ["A"]},
            {"region": "Far", "matched_locations": []},
        ]

    def test_workers_option(self, input_files):
        regions_path, locations_path, results_path = input_files

        exit_code = main(
            [str(regions_path), str(locations_path), str(results_path), "--workers", "2"]
        )

        assert exit_code == 0
        assert json.loads(results_path.read_text(encoding="utf-8"))[0]["matched_locations"] == ["A"]

    def test_missing_input_returns_error(self, tmp_path, caplog):
        exit_code = main(
            [str(tmp_path / "nope.json"), str(tmp_path / "locations.json"), str(tmp_path / "out.json")]
        )

        assert exit_code == 1
        assert "Regions file not found" in caplog.text
        assert not (tmp_path / "out.json").exists()

    def test_unclosed_polygon_needs_flag(self, input_files):
        regions_path, locations_path, results_path = input_files
        regions_path.write_text(
            json.dumps([{"name": "R", "coordinates": [[[0, 0], [0, 1], [1, 1], [1, 0]]]}]),
            encoding="utf-8",
        )
        argv = [str(regions_path), str(locations_path), str(results_path)]

        assert main(argv) == 1
        assert main(argv + ["--allow-unclosed"]) == 0
        assert json.loads(results_path.read_text(encoding="utf-8")) == [
            {"region": "R", "matched_locations": ["A"]},
        ]


class TestParser:
    """Argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["r.json", "l.json", "o.json"])

        assert args.allow_unclosed is False
        assert args.workers is None
        assert args.log_level == "INFO"

    def test_requires_three_paths(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["r.json", "l.json"])


class TestCliMalformedInput:
    """Unreadable inputs are reported and exit with status 1."""

    def test_invalid_utf8_locations(self, input_files, caplog):
        regions_path, locations_path, results_path = input_files
        locations_path.write_bytes(b'[{"name": "A\xff", "coordinates": [0, 0]}]')

        exit_code = main([str(regions_path), str(locations_path), str(results_path)])

        assert exit_code == 1
        assert "Locations JSON is invalid" in caplog.text
        assert not results_path.exists()

    def test_coordinate_too_large_for_float(self, input_files, caplog):
        regions_path, locations_path, results_path = input_files
        locations_path.write_text(
            '[{"name": "A", "coordinates": [1' + "0" * 400 + ', 0]}]', encoding="utf-8"
        )

        exit_code = main([str(regions_path), str(locations_path), str(results_path)])

        assert exit_code == 1
        assert "invalid coordinates" in caplog.text
        assert not results_path.exists()
