"""Configure pytest for the Legalis project."""
import os
import sys
from pathlib import Path

# =============================================================================
# Test Environment Configuration
# =============================================================================
# Set environment for tests BEFORE any imports
# Keeps bcrypt cheap, storage in memory and analyses off the network
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LEGALIS_PROVIDER", "mock")
os.environ.setdefault("LEGALIS_DB_PATH", ":memory:")
os.environ.setdefault("LEGALIS_SIMULATE_LATENCY", "false")
os.environ.setdefault("LEGALIS_BCRYPT_ROUNDS", "4")

# Add project root so tests can import app, auth and storage
root_path = Path(__file__).parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))


def pytest_configure(config):
    """Ensure paths and environment are set before test collection."""
    os.environ.setdefault("ENV", "test")
    os.environ.setdefault("LEGALIS_PROVIDER", "mock")

    if str(root_path) not in sys.path:
        sys.path.insert(0, str(root_path))
