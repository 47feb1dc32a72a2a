"""Root test configuration: environment isolation and source-tree helpers"""

import os

import pytest

from postref.config import ENV_PREFIX


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop any POSTREF_* variables from the outer environment so settings defaults apply."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.fixture(name="write_post")
def write_post_fixture(tmp_path):
    """Factory writing a source file under tmp_path/posts and returning its path."""
    root = tmp_path / "posts"

    def _write(name: str, text: str):
        p = root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    return _write
