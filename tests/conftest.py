"""Shared pytest fixtures for the SAM builder test suite.

Provides:
- reference_bundle: reference accounts with every optional table
- minimal_bundle: same accounts, required tables only
"""

import pytest

from src.data.io_bundle import IOBundle
from tests.bundle_factory import make_bundle


@pytest.fixture
def reference_bundle() -> IOBundle:
    return make_bundle()


@pytest.fixture
def minimal_bundle() -> IOBundle:
    return make_bundle(taxes=None, imports=None, exports=None, factor_income=None)
