import os
import string
import subprocess
import sys
from pathlib import Path

from propeval.adapters.ids import new_property_id

SRC = Path(__file__).resolve().parents[1] / "src"


def test_property_ids_are_url_safe():
    allowed = set(string.ascii_letters + string.digits + "-_")
    ids = {new_property_id() for _ in range(200)}

    assert len(ids) == 200
    for pid in ids:
        assert len(pid) == 12
        assert set(pid) <= allowed


def test_memory_repo_does_not_pull_in_sql_stack():
    code = (
        "import sys\n"
        "import propeval.adapters.memory_repo\n"
        "assert 'sqlmodel' not in sys.modules\n"
        "assert 'sqlalchemy' not in sys.modules\n"
    )
    env = {**os.environ, "PYTHONPATH": str(SRC)}
    proc = subprocess.run([sys.executable, "-c", code], env=env, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
