from __future__ import annotations

import os

os.environ.setdefault("GIFSEARCH_GIPHY_API_KEY", "test-giphy-key")
