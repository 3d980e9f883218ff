from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="officeflow-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'officeflow.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")
os.environ["OFFICEFLOW_USER"] = "maria"


@pytest.fixture
def database():
    from officeflow.infra.db import create_schema, drop_schema

    create_schema()
    yield
    drop_schema()
