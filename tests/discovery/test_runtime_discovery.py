from __future__ import annotations

import sys
from pathlib import Path

import pytest

from deprecated_after.core.errors import ScriptError
from deprecated_after.core.exit_codes import ERR_CONFIG, ERR_DISCOVERY
from deprecated_after.discovery import discover_imported, iter_modules

API = '''
from deprecated_after import deprecated_after
from os.path import join


@deprecated_after("2025-01-01", reason="moved")
def old_api():
    pass


def fresh_api():
    pass


@deprecated_after("3.0")
class Legacy:
    @deprecated_after("2.0")
    def __init__(self):
        pass

    @property
    @deprecated_after("1.5")
    def name(self):
        return ""

    @staticmethod
    @deprecated_after("1.6")
    def helper():
        pass

    class Inner:
        @deprecated_after("4.0")
        def run(self):
            pass


alias = old_api
'''


@pytest.fixture
def runtime_pkg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, write_module):
    name = "rt_demo_pkg"
    write_module(tmp_path, f"{name}/__init__.py", "")
    write_module(tmp_path, f"{name}/api.py", API)
    write_module(tmp_path, f"{name}/sub/__init__.py", "")
    write_module(
        tmp_path,
        f"{name}/sub/more.py",
        "from deprecated_after import deprecated_after\nfrom ..api import Legacy\n\n@deprecated_after('9.9')\ndef later():\n    pass\n",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    yield tmp_path, name
    for module in [m for m in sys.modules if m == name or m.startswith(f"{name}.")]:
        del sys.modules[module]


def test_iter_modules_walks_package_in_name_order(runtime_pkg) -> None:
    _, name = runtime_pkg
    assert [m.__name__ for m in iter_modules(name)] == [name, f"{name}.api", f"{name}.sub", f"{name}.sub.more"]


def test_discover_imported_reads_attached_markers(runtime_pkg) -> None:
    root, name = runtime_pkg
    records = {r.element_label: r for r in discover_imported([name], project_root=root)}
    assert set(records) == {
        f"{name}.api.old_api",
        f"{name}.api.Legacy",
        f"{name}.api.Legacy.__init__",
        f"{name}.api.Legacy.name",
        f"{name}.api.Legacy.helper",
        f"{name}.api.Legacy.Inner.run",
        f"{name}.sub.more.later",
    }
    assert records[f"{name}.api.Legacy"].element_kind == "class"
    assert records[f"{name}.api.Legacy.__init__"].element_kind == "constructor"
    assert records[f"{name}.api.Legacy.name"].element_kind == "property"
    assert records[f"{name}.api.old_api"].reason == "moved"
    assert records[f"{name}.api.old_api"].path == f"{name}/api.py"
    assert records[f"{name}.api.old_api"].line > 0


def test_discover_imported_requires_packages() -> None:
    with pytest.raises(ScriptError) as err:
        discover_imported(["  "])
    assert err.value.code == ERR_CONFIG


def test_discover_imported_wraps_import_failures(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, write_module) -> None:
    write_module(tmp_path, "rt_broken_pkg/__init__.py", "raise RuntimeError('boom')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    with pytest.raises(ScriptError) as err:
        discover_imported(["rt_broken_pkg"])
    assert err.value.code == ERR_DISCOVERY
    assert "boom" in str(err.value)
    sys.modules.pop("rt_broken_pkg", None)
