import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from jobs.cli import app

runner = CliRunner()


ANALYSIS = {
    "imageId": "shot-1",
    "elements": [
        {
            "id": "e1",
            "type": "button",
            "properties": {"text": "Save", "backgroundColor": "#1976d2"},
            "position": {"x": 0, "y": 0, "width": 120, "height": 40},
        },
        {"id": "bad", "type": "card", "position": {"x": 0, "y": 0, "width": -50, "height": 10}},
    ],
    "layout": {"type": "flex", "direction": "row"},
}


def _write_analysis(tmp_path: Path) -> Path:
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps(ANALYSIS))
    return path


def test_run_writes_one_file_per_artifact(tmp_path: Path) -> None:
    out = tmp_path / "out"
    result = runner.invoke(app, ["run", str(_write_analysis(tmp_path)), "--output-dir", str(out)])

    assert result.exit_code == 0, result.output
    job_dir = out / "shot-1"
    assert sorted(p.name for p in job_dir.glob("*.ts*")) == [
        "ButtonE1.tsx",
        "CardBad.tsx",
        "MainShot1.tsx",
        "index.ts",
    ]
    assert "Job shot-1 completed" in result.output


def test_run_with_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "job.yaml"
    config_path.write_text(
        yaml.dump({"output_dir": str(tmp_path / "cfg-out"), "component_extension": ".jsx", "show_progress": False})
    )

    result = runner.invoke(app, ["run", str(_write_analysis(tmp_path)), "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "cfg-out" / "shot-1" / "ButtonE1.jsx").exists()


def test_run_missing_analysis(tmp_path: Path) -> None:
    result = runner.invoke(app, ["run", str(tmp_path / "missing.json")])

    assert result.exit_code == 1


def test_run_invalid_analysis(tmp_path: Path) -> None:
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps({"elements": []}))

    result = runner.invoke(app, ["run", str(path), "--output-dir", str(tmp_path / "out")])

    assert result.exit_code == 1


def test_run_missing_config(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["run", str(_write_analysis(tmp_path)), "--config", str(tmp_path / "nope.yaml")]
    )

    assert result.exit_code == 1


def test_demo_is_deterministic(tmp_path: Path) -> None:
    first = runner.invoke(app, ["demo", "--seed", "7", "--output-dir", str(tmp_path / "a")])
    second = runner.invoke(app, ["demo", "--seed", "7", "--output-dir", str(tmp_path / "b")])

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    files_a = sorted(p.name for p in (tmp_path / "a" / "demo-7").glob("*.tsx"))
    files_b = sorted(p.name for p in (tmp_path / "b" / "demo-7").glob("*.tsx"))
    assert files_a == files_b
    assert "HeaderHeader.tsx" in files_a
    for name in files_a:
        assert (tmp_path / "a" / "demo-7" / name).read_text() == (tmp_path / "b" / "demo-7" / name).read_text()


def test_list_report_and_show(tmp_path: Path) -> None:
    out = tmp_path / "out"
    assert runner.invoke(app, ["run", str(_write_analysis(tmp_path)), "--output-dir", str(out)]).exit_code == 0

    listed = runner.invoke(app, ["list-jobs", "--output-dir", str(out)])
    assert listed.exit_code == 0
    assert "shot-1" in listed.output

    (out / "shot-1" / "report.md").unlink()
    reported = runner.invoke(app, ["report", "shot-1", "--output-dir", str(out)])
    assert reported.exit_code == 0
    assert (out / "shot-1" / "report.md").exists()

    shown = runner.invoke(app, ["show", "shot-1", "--output-dir", str(out)])
    assert shown.exit_code == 0
    assert "ButtonE1.tsx" in shown.output
    assert "1 fallback" in shown.output

    source = runner.invoke(app, ["show", "shot-1", "--output-dir", str(out), "--artifact", "index"])
    assert source.exit_code == 0
    assert "MainComponent" in source.output


def test_unknown_job(tmp_path: Path) -> None:
    assert runner.invoke(app, ["report", "nope", "--output-dir", str(tmp_path)]).exit_code == 1
    assert runner.invoke(app, ["show", "nope", "--output-dir", str(tmp_path)]).exit_code == 1


def test_invalid_log_level(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--log-level", "LOUD", "list-jobs", "--output-dir", str(tmp_path)])

    assert result.exit_code == 1
