from __future__ import annotations

import json
from pathlib import Path

import pytest

from insight_dashboard.io.read import load_records
from insight_dashboard.io.write import write_records, write_summary
from insight_dashboard.records import RecordSet


def test_load_records_reads_plain_json_list(tmp_path: Path) -> None:
    path = tmp_path / "records.json"
    path.write_text(json.dumps([{"sector": "Energy", "intensity": 6}]), encoding="utf-8")

    records = load_records(path)

    assert len(records) == 1
    assert records.records[0].intensity == 6.0


def test_load_records_unwraps_api_envelope(tmp_path: Path) -> None:
    path = tmp_path / "records.json"
    payload = {"data": [{"topic": "oil"}, {"topic": "gas"}], "count": 2}
    path.write_text(json.dumps(payload), encoding="utf-8")

    records = load_records(path)

    assert [record.topic for record in records] == ["oil", "gas"]


def test_load_records_reads_csv_with_bom(tmp_path: Path) -> None:
    path = tmp_path / "records.csv"
    path.write_text(
        "\ufeffsector,country,intensity,end_year\nEnergy,India,6,2027\nRetail,,,\n",
        encoding="utf-8",
    )

    records = load_records(path)

    first, second = records.records
    assert first.sector == "Energy"
    assert first.end_year == "2027"
    assert second.country is None
    assert second.intensity is None


def test_load_records_rejects_unknown_shapes(tmp_path: Path) -> None:
    bad_json = tmp_path / "records.json"
    bad_json.write_text(json.dumps({"data": "nope"}), encoding="utf-8")
    bad_suffix = tmp_path / "records.txt"
    bad_suffix.write_text("", encoding="utf-8")

    with pytest.raises(ValueError):
        load_records(bad_json)
    with pytest.raises(ValueError):
        load_records(bad_suffix)


def test_write_records_and_summary(tmp_path: Path) -> None:
    records = RecordSet.from_rows([{"topic": "oil", "relevance": 3}])

    records_path = write_records(records, tmp_path / "nested" / "records.json")
    summary_path = write_summary({"records": 1}, tmp_path / "summary.json")

    assert load_records(records_path) == records
    assert json.loads(summary_path.read_text(encoding="utf-8")) == {"records": 1}
