"""Unit tests for report rendering."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from tokensurvey.advisor import assess
from tokensurvey.report import banner, file_line, render_json, render_text, render_yaml, report_data
from tokensurvey.scan.stats import FileRecord

pytestmark = pytest.mark.unit


@pytest.fixture
def small_stats(make_stats):
    """Stats for a tiny mixed codebase."""
    return make_stats(("app/models/user.rb", 1500), ("app/javascript/app.js", 500), ("config/routes.rb", 1000))


class TestRenderText:
    """Tests for render_text."""

    def test_sections_in_order(self, small_stats) -> None:
        text = render_text(small_stats, assess(small_stats))
        headings = [
            "==== Token Analysis Summary ====",
            "==== By File Extension ====",
            "==== Largest Files (by tokens) ====",
            "==== CAG vs RAG Analysis ====",
        ]
        positions = [text.index(h) for h in headings]
        assert positions == sorted(positions)

    def test_summary_values(self, small_stats) -> None:
        text = render_text(small_stats, assess(small_stats))
        assert "Total files analyzed: 3" in text
        assert "Total tokens: 3,000" in text
        assert "Average tokens per file: 1,000" in text

    def test_extension_breakdown(self, small_stats) -> None:
        text = render_text(small_stats, assess(small_stats))
        assert ".rb: 2 files, 2,500 tokens (83%)" in text
        assert ".js: 1 files, 500 tokens (17%)" in text
        assert text.index(".rb: ") < text.index(".js: ")

    def test_largest_files_ranked(self, small_stats) -> None:
        text = render_text(small_stats, assess(small_stats))
        assert "1. app/models/user.rb: 1,500 tokens" in text
        assert "2. config/routes.rb: 1,000 tokens" in text
        assert "3. app/javascript/app.js: 500 tokens" in text

    def test_analysis_section(self, small_stats) -> None:
        text = render_text(small_stats, assess(small_stats))
        assert "Estimated embedding cost: $0.00" in text
        assert "Detected framework type: BOTH" in text
        assert "- Estimated number of chunks: 3" in text
        assert "Rails-specific RAG considerations:" in text
        assert "Recommendation: prefer direct context loading" in text
        assert "- config/routes.rb" in text

    def test_javascript_omits_rails_sections(self, make_stats) -> None:
        stats = make_stats(("a.ts", 10))
        text = render_text(stats, assess(stats))
        assert "Detected framework type: JAVASCRIPT" in text
        assert "Rails-specific" not in text

    def test_half_average_rounds_up(self, make_stats, tmp_path: Path) -> None:
        """Test that a 2.5 token average is reported as 3 in text and data."""
        stats = make_stats(("a.js", 2), ("b.js", 3))
        assessment = assess(stats)
        assert "Average tokens per file: 3" in render_text(stats, assessment)
        assert report_data(tmp_path, stats, assessment)["summary"]["avg_tokens_per_file"] == 3

    def test_empty_run(self, make_stats) -> None:
        """Test that an empty run renders without dividing by zero."""
        stats = make_stats()
        text = render_text(stats, assess(stats))
        assert "Total files analyzed: 0" in text
        assert "Average tokens per file: 0" in text


class TestSmallHelpers:
    """Tests for banner and file_line."""

    def test_banner(self, tmp_path: Path) -> None:
        assert banner(tmp_path) == f"Analyzing codebase in {tmp_path}..."

    def test_file_line(self) -> None:
        assert file_line(FileRecord(path="a/b.js", size=3, tokens=7)) == "a/b.js: 7 tokens"


class TestMachineReadable:
    """Tests for report_data and its JSON/YAML renderings."""

    def test_report_data_shape(self, small_stats, tmp_path: Path) -> None:
        data = report_data(tmp_path, small_stats, assess(small_stats))
        assert data["root"] == str(tmp_path)
        assert data["summary"]["total_tokens"] == 3000
        assert [e["extension"] for e in data["by_extension"]] == [".rb", ".js"]
        assert data["largest_files"][0] == {"rank": 1, "path": "app/models/user.rb", "tokens": 1500, "bytes": 6000}
        assert data["analysis"]["framework"] == "both"
        assert data["analysis"]["recommendation"] == "prefer direct context loading"

    def test_json_round_trip(self, small_stats, tmp_path: Path) -> None:
        data = report_data(tmp_path, small_stats, assess(small_stats))
        assert json.loads(render_json(data)) == data

    def test_yaml_keeps_key_order(self, small_stats, tmp_path: Path) -> None:
        data = report_data(tmp_path, small_stats, assess(small_stats))
        text = render_yaml(data)
        assert yaml.safe_load(text) == data
        assert text.index("summary:") < text.index("analysis:")
