import subprocess

import pytest
from pyfakefs.fake_filesystem_unittest import Patcher


@pytest.fixture
def fs():
    with Patcher() as patcher:
        yield patcher.fs


@pytest.fixture
def bare_remote(tmp_path):
    """An empty bare repository standing in for the GitHub remote."""
    remote = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", str(remote)], check=True, capture_output=True)
    return remote
