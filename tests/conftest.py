import os
import pytest

@pytest.fixture(scope="session")
def rng_seed():
    return int(os.environ.get("AOBAKE_TEST_SEED", "1234"))

class ListSink:
    """Collects advisories instead of logging them."""
    def __init__(self):
        self.messages = []

    def warn(self, message):
        self.messages.append(message)

@pytest.fixture
def sink():
    return ListSink()
