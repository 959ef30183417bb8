"""Shared pytest fixtures for devdashboard tests."""

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def poetry_lock_text():
    """poetry.lock with one runtime and one dev package."""
    return """\
[[package]]
name = "requests"
version = "2.28.1"
description = "Python HTTP for Humans."
category = "main"
optional = false
python-versions = ">=3.7, <4"

[[package]]
name = "pytest"
version = "7.2.0"
description = "pytest: simple powerful testing with Python"
category = "dev"
optional = false
python-versions = ">=3.7"

[metadata]
lock-version = "1.1"
python-versions = "^3.9"
content-hash = "0123456789abcdef"
"""


@pytest.fixture
def pipfile_lock_text():
    return """\
{
    "_meta": {
        "hash": {"sha256": "abc"},
        "pipfile-spec": 6,
        "requires": {"python_version": "3.11"},
        "sources": [{"name": "pypi", "url": "https://pypi.org/simple", "verify_ssl": true}]
    },
    "default": {
        "requests": {"hashes": ["sha256:aaa"], "index": "pypi", "version": "==2.28.1"},
        "urllib3": {"hashes": ["sha256:bbb"], "version": "==1.26.13"}
    },
    "develop": {
        "pytest": {"hashes": ["sha256:ccc"], "index": "pypi", "version": "==7.2.0"}
    }
}
"""


@pytest.fixture
def uv_lock_text():
    return """\
version = 1
requires-python = ">=3.11"

[[package]]
name = "myproject"
version = "0.1.0"
source = { editable = "." }
dependencies = [
    { name = "httpx" },
]

[package.dev-dependencies]
dev = [
    { name = "pytest" },
]

[[package]]
name = "httpx"
version = "0.27.0"
source = { registry = "https://pypi.org/simple" }

[[package]]
name = "pytest"
version = "8.0.0"
source = { registry = "https://pypi.org/simple" }
marker = "extra == 'dev'"

[[package]]
name = "internal-lib"
version = "1.4.0"
source = { git = "https://github.com/acme/internal-lib?rev=v1.4.0#abc123" }
"""
