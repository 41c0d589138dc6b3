"""Tests for access-token loading."""

import json
import logging
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from figmachunk import MissingCredentials, load_access_token
from figmachunk.credentials import mask_token


def write_config(path: Path, token=None) -> Path:
    env = {"FIGMA_ACCESS_TOKEN": token} if token else {}
    path.write_text(json.dumps({"mcpServers": {"figma": {"command": "figmachunk", "env": env}}}))
    return path


def test_token_from_environment():
    assert load_access_token(argv=["prog"], environ={"FIGMA_ACCESS_TOKEN": "figd_env"}) == "figd_env"


def test_config_file_takes_precedence(tmp_path):
    config = write_config(tmp_path / "mcp.json", "figd_file")
    token = load_access_token(argv=["prog", f"--config={config}"],
                              environ={"FIGMA_ACCESS_TOKEN": "figd_env"})
    assert token == "figd_file"


def test_config_without_token_falls_back(tmp_path):
    config = write_config(tmp_path / "mcp.json")
    token = load_access_token(argv=["prog", f"--config={config}"],
                              environ={"FIGMA_ACCESS_TOKEN": "figd_env"})
    assert token == "figd_env"


def test_unreadable_config_logs_and_falls_back(tmp_path, caplog):
    bad = tmp_path / "mcp.json"
    bad.write_text("{not json")

    with caplog.at_level(logging.WARNING, logger="figmachunk.credentials"):
        token = load_access_token(argv=[f"--config={bad}"], environ={"FIGMA_ACCESS_TOKEN": "figd_env"})

    assert token == "figd_env"
    assert "Failed to load config" in caplog.text


def test_missing_everywhere():
    with pytest.raises(MissingCredentials):
        load_access_token(argv=["prog"], environ={})


def test_token_never_logged_in_full(caplog):
    with caplog.at_level(logging.DEBUG, logger="figmachunk.credentials"):
        load_access_token(argv=[], environ={"FIGMA_ACCESS_TOKEN": "figd_secret_value_123"})

    assert "figd_secret_value_123" not in caplog.text
    assert mask_token("figd_secret_value_123") == "figd_sec..."
