"""
Production entrypoint for the market study web server.

Binds to 0.0.0.0:$PORT.
"""

import os
import uvicorn

from utils.config import Config
from utils.logging import setup_logging

if __name__ == "__main__":
    config = Config.load()
    setup_logging(config.log_level, config.log_format)

    port = int(os.getenv("PORT", "8000"))
    print(f"Starting Market Study Valuation Engine on port {port}")

    # Import app here so logging is configured first
    from web.app import app

    uvicorn.run(app, host="0.0.0.0", port=port)
