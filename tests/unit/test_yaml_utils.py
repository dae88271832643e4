"""Tests for YAML loading utilities with duplicate key validation."""

from __future__ import annotations

import io
import pytest

from trialforge.config.yaml_utils import load_yaml, load_yaml_file


def test_load_yaml_accepts_valid_mapping() -> None:
    """Test a plain nested mapping loads unchanged."""
    yaml_text = """
    block:
      block_id: pure_mov
      csi: 200
    """
    result = load_yaml(io.StringIO(yaml_text))
    assert result["block"]["block_id"] == "pure_mov"
    assert result["block"]["csi"] == 200


def test_load_yaml_keeps_task_labels_as_strings() -> None:
    """Test the task labels 'or' and 'mov' stay strings."""
    result = load_yaml("task1: or\ntask2: mov\n")
    assert result == {"task1": "or", "task2": "mov"}


def test_load_yaml_rejects_duplicate_keys() -> None:
    """Test a repeated key raises ValueError."""
    yaml_text = """
    soa:
      type: fixed
    soa:
      type: choice
    """
    with pytest.raises(ValueError, match="Duplicate key"):
        load_yaml(io.StringIO(yaml_text))


def test_load_yaml_file_missing(tmp_path) -> None:
    """Test a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_yaml_file(tmp_path / "missing.yml")


def test_load_yaml_file_empty(tmp_path) -> None:
    """Test an empty file raises ValueError."""
    path = tmp_path / "empty.yml"
    path.write_text("")
    with pytest.raises(ValueError, match="Empty"):
        load_yaml_file(path)
