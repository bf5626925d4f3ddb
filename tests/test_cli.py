"""Tests for the dynamic-docx command line entry point."""

import base64
import json
import sys

import pytest

from dynamic_docx import cli

from conftest import PNG_BYTES, paragraph, read_entries


@pytest.fixture
def template_path(tmp_path, make_template):
    path = tmp_path / "template.docx"
    path.write_bytes(
        make_template(
            paragraph("{{title}}"),
            paragraph("{{itemsTable}}"),
            paragraph("{{badge}}"),
            header=paragraph("{{headerTitle}}"),
        )
    )
    return path


def run_cli(monkeypatch, *args) -> int:
    monkeypatch.setattr(cli, "setup_logging", lambda: None)
    monkeypatch.setattr(sys, "argv", ["dynamic-docx", *map(str, args)])
    return cli.main()


def test_renders_job(monkeypatch, tmp_path, template_path):
    job = {
        "data": {"title": "Q1 Report"},
        "header": {"headerTitle": "Confidential"},
        "tables": [
            {
                "placeholder": "itemsTable",
                "headers": [{"name": "Item", "key": "item", "width": 3000}],
                "rows": [["Pens"]],
                "style": {"headerBgColor": "4472C4"},
            }
        ],
        "images": [{"placeholder": "badge", "base64": base64.b64encode(PNG_BYTES).decode()}],
    }
    job_path = tmp_path / "job.json"
    job_path.write_text(json.dumps(job), encoding="utf-8")
    output = tmp_path / "out" / "report.docx"

    assert run_cli(monkeypatch, template_path, job_path, output) == 0

    entries = read_entries(output.read_bytes())
    doc = entries["word/document.xml"].decode()
    assert "<w:t>Q1 Report</w:t>" in doc
    assert 'w:fill="4472C4"' in doc
    assert "<w:drawing>" in doc
    assert b"<w:t>Confidential</w:t>" in entries["word/header1.xml"]
    assert entries["word/media/image1.png"] == PNG_BYTES


def test_relative_image_path_resolves_against_job(monkeypatch, tmp_path, template_path):
    (tmp_path / "badge.png").write_bytes(PNG_BYTES)
    job_path = tmp_path / "job.json"
    job_path.write_text(json.dumps({"images": [{"placeholder": "badge", "path": "badge.png"}]}))
    output = tmp_path / "report.docx"

    assert run_cli(monkeypatch, template_path, job_path, output) == 0
    assert read_entries(output.read_bytes())["word/media/image1.png"] == PNG_BYTES


def test_list_placeholders(monkeypatch, capsys, template_path):
    assert run_cli(monkeypatch, template_path, "--list-placeholders") == 0
    lines = capsys.readouterr().out.split()
    assert lines == ["badge", "headerTitle", "itemsTable", "title"]


def test_usage_error(monkeypatch, capsys):
    assert run_cli(monkeypatch, "only-one-arg") == 1
    assert "Usage:" in capsys.readouterr().err


def test_missing_template(monkeypatch, capsys, tmp_path):
    job_path = tmp_path / "job.json"
    job_path.write_text("{}")
    assert run_cli(monkeypatch, tmp_path / "missing.docx", job_path, tmp_path / "o.docx") == 1
    assert "Template file not found" in capsys.readouterr().err


def test_image_without_source(monkeypatch, capsys, tmp_path, template_path):
    job_path = tmp_path / "job.json"
    job_path.write_text(json.dumps({"images": [{"placeholder": "badge"}]}))
    assert run_cli(monkeypatch, template_path, job_path, tmp_path / "o.docx") == 1
    assert "No image source provided for placeholder: badge" in capsys.readouterr().err
    assert not (tmp_path / "o.docx").exists()


def test_job_must_be_object(monkeypatch, capsys, tmp_path, template_path):
    job_path = tmp_path / "job.json"
    job_path.write_text("[]")
    assert run_cli(monkeypatch, template_path, job_path, tmp_path / "o.docx") == 1
    assert "must contain a JSON object" in capsys.readouterr().err
