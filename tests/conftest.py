import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / 'src'):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from tests.monitor_test_helpers import rss_document  # noqa: E402


@pytest.fixture
def write_table(tmp_path):
    def _write(rows, name: str = 'companies.csv') -> Path:
        path = tmp_path / name
        if isinstance(rows, str):
            path.write_text(rows, encoding='utf-8')
        else:
            path.write_text(''.join(f'{company},{source}\n' for company, source in rows), encoding='utf-8')
        return path

    return _write


@pytest.fixture
def write_feed(tmp_path):
    def _write(name: str, *published) -> Path:
        path = tmp_path / name
        path.write_text(rss_document(*published), encoding='utf-8')
        return path

    return _write
