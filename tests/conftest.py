"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pygit2
import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local apidiff package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of apidiff modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("apidiff"):
        del sys.modules[module_name]


BASE_API = """\
pub mod demo
pub fn demo::parse(&str) -> u32
pub struct demo::Config
pub fn demo::legacy()
"""

TARGET_API = """\
pub mod demo
pub fn demo::parse(&str) -> u64
pub struct demo::Config
pub fn demo::fresh()
"""

# Prints the committed API.txt of whatever revision it runs in
CAT_API = "import pathlib, sys; sys.stdout.write(pathlib.Path('API.txt').read_text())"


@pytest.fixture(autouse=True)
def _isolate_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    """Keep user config and APIDIFF__ env vars out of every test."""
    for key in list(os.environ):
        if key.upper().startswith("APIDIFF__"):
            monkeypatch.delenv(key)
    fake_global = tmp_path_factory.mktemp("global") / "config.yaml"
    monkeypatch.setattr("apidiff.config.loader.GLOBAL_CONFIG_PATH", fake_global)


def commit_files(repo: pygit2.Repository, files: dict[str, str], message: str) -> pygit2.Oid:
    """Write files into the work tree and commit them on HEAD."""
    workdir = Path(repo.workdir)
    for name, text in files.items():
        (workdir / name).write_text(text)
        repo.index.add(name)
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    parents = [] if repo.head_is_unborn else [repo.head.target]
    return repo.create_commit("HEAD", sig, sig, message, tree, parents)


@pytest.fixture
def api_repo(tmp_path: Path) -> pygit2.Repository:
    """Repository whose API.txt differs between tag v1 / branch release and main.

    v1 and release point at the first commit (BASE_API); main carries
    TARGET_API.
    """
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    first = commit_files(repo, {"README.md": "# demo\n", "API.txt": BASE_API}, "Initial API")
    repo.references.create("refs/tags/v1", first)
    repo.branches.local.create("release", repo.get(first))
    commit_files(repo, {"API.txt": TARGET_API}, "Rework API")
    return repo


@pytest.fixture
def api_command() -> list[str]:
    """Extractor command that emits the revision's API.txt in lines format."""
    return [sys.executable, "-c", CAT_API]
