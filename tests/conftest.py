"""
Shared fixtures for structure analyzer tests.
Creates isolated temporary directories with controlled XML corpora.
"""
import logging
import pytest
import tempfile
from pathlib import Path
from typing import Callable, Dict


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_xml(temp_dir) -> Callable[[str, str], Path]:
    """Writes `content` to temp_dir/relative_path, creating parent directories."""
    def _write(relative_path: str, content: str) -> Path:
        path = temp_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def xml_corpus(write_xml, temp_dir) -> Dict[str, Path]:
    """
    Creates a controlled corpus:
    - 2 books with the same skeleton but different values (one group)
    - 1 nested and 1 flat document (two more groups)
    - 1 TEI file in a subdirectory, same skeleton as the books
    - 1 malformed file (failure)
    - 1 .txt file (filtered out by extension)
    """
    files = {
        "book1": write_xml("book1.xml", '<book id="1"><title>A</title></book>'),
        "book2": write_xml("book2.xml", '<book id="2"><title>B</title></book>'),
        "nested": write_xml("nested.xml", "<a><b><c/></b></a>"),
        "flat": write_xml("flat.xml", "<a><b/><c/></a>"),
        "sub_book": write_xml("sub/book3.tei", '<book id="3"><title>C</title></book>'),
        "broken": write_xml("broken.xml", "<book><title>unclosed</book>"),
        "notes": write_xml("notes.txt", "<book/>"),
    }
    return files


@pytest.fixture
def restore_root_logger():
    """init_logging reconfigures the root logger; put the previous handlers back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
