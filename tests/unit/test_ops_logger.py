from __future__ import annotations

import json
from pathlib import Path

from phonename.ops_logger import LookupTrace, OpsLogger, build_ops_record
from phonename.pipeline.gate import GateDecision
from phonename.schemas import ExtractionCandidate, LookupRequest, LookupResult, Provenance


REQ = LookupRequest(phone_number="0712345678")


def test_record_for_partial_success():
    trace = LookupTrace(
        mode="playwright",
        url="https://www.truecaller.com/search/ke/0712345678",
        status_code=200,
        gate=GateDecision(gated=True, markers=["Sign in"]),
        strategies=["partial_text"],
        candidate=ExtractionCandidate(
            value="Jane Mwangi", provenance=Provenance.PARTIAL, strategy="partial_text", locator="Owner"
        ),
        navigate_s=5.123456,
        extract_s=0.01,
    )
    result = LookupResult.from_candidate(trace.candidate)

    record = build_ops_record(REQ, trace, result, 5.2)

    assert record["pnl_ops"] == 1
    assert record["phone_number"] == "0712345678"
    assert record["gate"] is True
    assert record["gate_markers"] == ["Sign in"]
    assert record["source"] == "truecaller_partial"
    assert record["locator"] == "Owner"
    assert record["error"] is None
    assert record["durations"] == {"navigate_s": 5.1235, "extract_s": 0.01, "total_s": 5.2}


def test_record_for_fault_before_extraction():
    record = build_ops_record(None, LookupTrace(mode="static"), LookupResult.failed("Page crashed"), -1.0)
    assert record["phone_number"] is None
    assert record["gate"] is False
    assert record["gate_markers"] == []
    assert record["strategies"] == []
    assert record["source"] is None
    assert record["error"] == "Page crashed"
    assert record["durations"]["total_s"] == 0.0


def test_log_run_appends_one_line_per_run(tmp_path: Path):
    log = OpsLogger(tmp_path / "nested" / "ops.log")
    log.log_run(REQ, LookupTrace(mode="static"), LookupResult.failed("first"), 0.1)
    log.log_run(REQ, LookupTrace(mode="static"), LookupResult.failed("Wanjiků missing"), 0.1)

    lines = (tmp_path / "nested" / "ops.log").read_text(encoding="utf-8").splitlines()
    assert [json.loads(l)["error"] for l in lines] == ["first", "Wanjiků missing"]
    assert "Wanjiků" in lines[1]


def test_unserializable_values_are_stringified(tmp_path: Path):
    log = OpsLogger(tmp_path / "ops.log")
    log.write({"pnl_ops": 1, "path": Path("/tmp/x.png")})

    record = json.loads((tmp_path / "ops.log").read_text(encoding="utf-8"))
    assert record["path"] == "/tmp/x.png"


def test_write_errors_go_to_stderr(tmp_path: Path, capsys):
    target = tmp_path / "dir_not_file"
    target.mkdir()

    OpsLogger(target).write({"pnl_ops": 1})

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Ops log write failed" in captured.err
