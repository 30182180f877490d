# conftest.py

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """
    core_logging 插件会调用 dictConfig 替换根日志处理器。
    每个测试结束后恢复原状，保证 caplog 等 fixture 不受影响。
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    named_levels = {
        name: logging.getLogger(name).level for name in ("konjure", "konjure_plugins")
    }
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, named_level in named_levels.items():
        logging.getLogger(name).setLevel(named_level)


@pytest.fixture
def source_tree(tmp_path):
    """A small asset tree: two scripts and a stylesheet at the top, one more script nested."""
    src = tmp_path / "src"
    (src / "widgets").mkdir(parents=True)
    (src / "a.js").write_text("var x=1;")
    (src / "b.js").write_text("var y=2;")
    (src / "c.css").write_text("body{color:red}")
    (src / "widgets" / "d.js").write_text("var z=3;\n")
    return src
