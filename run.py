#!/usr/bin/env python3
"""
Run the market study web server.
"""

import uvicorn

from utils.config import Config
from utils.logging import setup_logging


def main():
    """Start the web server."""
    config = Config.load()
    setup_logging(config.log_level, config.log_format)

    print(f"Starting Market Study Valuation Engine on http://{config.host}:{config.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
