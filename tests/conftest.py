import pytest

from minify_tools.class_ids import ClassIdGenerator
from minify_tools.class_registry import GlobalRegistry
from minify_tools.config import AllowList


class Project:
    def __init__(self, root):
        self.root = root

    def write(self, rel, text):
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def read(self, rel):
        return (self.root / rel).read_text(encoding="utf-8")

    def exists(self, rel):
        return (self.root / rel).exists()


@pytest.fixture
def make_registry():
    """Registry with its own id counter, so ids start at 'A' in every test."""

    def _make(*keep, app_css=None):
        registry = GlobalRegistry(AllowList(keep), ids=ClassIdGenerator())
        if app_css:
            registry.scan_css(app_css)
        return registry

    return _make


@pytest.fixture
def dist(tmp_path):
    """Minimal compiled project: dist/app.wxss + dist/pages/."""
    project = Project(tmp_path / "dist")
    (project.root / "pages").mkdir(parents=True)
    return project


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("DIST_DIR", "PAGES_DIR", "APP_CSS", "MARKUP_EXT", "STYLE_EXT",
                "KEEP_CLASS_NAMES", "CLASS_NAMES_JSON"):
        monkeypatch.delenv(key, raising=False)
