from pathlib import Path

try:
    import tomllib as tomli
except ModuleNotFoundError:  # pragma: no cover
    import tomli  # type: ignore

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_pyproject_core_deps_cover_runtime_imports():
    data = tomli.loads((REPO_ROOT / "pyproject.toml").read_text())
    deps = [d.lower() for d in data["project"]["dependencies"]]

    for name in ("numpy", "omegaconf", "rich", "shapely"):
        assert any(d.startswith(name) for d in deps)
    # The harness only drives external trackers; no deep learning stack.
    assert not any(d.startswith("torch") for d in deps)
