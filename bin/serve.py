"""Run the party server.

Usage: python bin/serve.py

Host, port and room settings are read from PARTY_* environment variables
(PORT is accepted as well).
"""

import sys
from pathlib import Path

import uvicorn

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from drawparty.server.settings import PartyServerSettings


def main() -> None:
    settings = PartyServerSettings()
    uvicorn.run(
        "drawparty.server.app:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
