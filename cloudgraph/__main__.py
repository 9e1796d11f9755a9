"""Entry point for `python -m cloudgraph`.

Usage:
    python -m cloudgraph
"""

from __future__ import annotations

import asyncio

from cloudgraph.app import main

asyncio.run(main())
