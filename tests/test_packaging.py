from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parents[1]


def test_project_metadata_has_no_readme():
    meta = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    assert meta["name"] == "co2twin"
    assert "readme" not in meta


def test_dashboard_draws_emission_matrix():
    src = (ROOT / "app" / "streamlit_app.py").read_text(encoding="utf-8")
    assert "px.imshow(emission_matrix(" in src
