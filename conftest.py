"""Global pytest configuration."""

import os

# Keep tests off the network: resolve places from the bundled fixture file
os.environ.setdefault("PLACES_PROVIDER", "fixtures")
