from pathlib import Path

import pytest

from retrial.config import RunConfig, load_run_config, load_tracker
from retrial.core.errors import ConfigurationError


def test_run_config_defaults():
    cfg = load_run_config()
    assert isinstance(cfg, RunConfig)
    assert cfg.cleanup is True
    assert cfg.options().fail_overlap is None
    assert cfg.context().fake is False


def test_run_config_merges_file_and_overrides(tmp_path: Path):
    path = tmp_path / "run.yaml"
    path.write_text("fail_overlap: 0.1\nskip_initialize: 5\nskip_labels: [occlusion]\ntemp_root: /tmp/trials\n")

    cfg = load_run_config(path, ["skip_initialize=0", "cleanup=false"])

    options = cfg.options()
    assert options.fail_overlap == pytest.approx(0.1)
    # Coerced to at least one frame.
    assert options.skip_initialize == 1
    assert options.skip_labels == {"occlusion"}
    assert cfg.context().cleanup is False
    assert cfg.context().temp_root == Path("/tmp/trials")


def test_run_config_rejects_unknown_keys():
    with pytest.raises(ConfigurationError):
        load_run_config(overrides=["fail_overlapp=0.1"])


def test_load_tracker(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TRACKER_HOME", "/opt/ncc")
    path = tmp_path / "ncc.yaml"
    path.write_text("command: ${oc.env:TRACKER_HOME}/ncc --fast\nlinkpath: /opt/ncc/lib\n")

    tracker = load_tracker(path)

    assert tracker.identifier == "ncc"
    assert tracker.command == "/opt/ncc/ncc --fast"
    assert tracker.linkpath == ("/opt/ncc/lib",)


def test_load_tracker_rejects_unknown_keys(tmp_path: Path):
    path = tmp_path / "t.yaml"
    path.write_text("identifier: t\ncommand: run\ntimeout: 10\n")
    with pytest.raises(ConfigurationError):
        load_tracker(path)


def test_load_tracker_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_tracker(tmp_path / "missing.yaml")
