#!/usr/bin/env python
"""Production server: no hot reload, INFO-level console logging."""

import os

os.environ["GH_APPLE_OAUTH_RELOAD"] = "0"

from gh_apple_oauth import main

if __name__ in {"__main__", "__mp_main__"}:
    main()
