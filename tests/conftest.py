"""Root test configuration: isolated content roots and an MDX file writer"""

from pathlib import Path

import pytest

from mdsite.config import Settings


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    """Development-mode settings whose docs and blog roots live under tmp_path."""
    return Settings(docs_dir=str(tmp_path / "docs"), content_dir=str(tmp_path / "content"))


@pytest.fixture(name="prod_settings")
def prod_settings_fixture(settings):
    return settings.model_copy(update={"mode": "production"})


@pytest.fixture(name="docs_root")
def docs_root_fixture(settings):
    return Path(settings.docs_dir)


@pytest.fixture(name="blog_root")
def blog_root_fixture(settings):
    return Path(settings.content_dir) / "blog"


@pytest.fixture(name="write_mdx")
def write_mdx_fixture():
    """Return a helper that writes `text` to root/relpath, creating parent directories."""
    def _write(root: Path, relpath: str, text: str) -> Path:
        path = root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
