"""Root test configuration: isolate tests from local config files and environment"""

import os

import pytest


ENV_PREFIX = "MDLOGSEQ_"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each test in an empty directory with no MDLOGSEQ_* variables set."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
