from __future__ import annotations

import logging
import os
import uvicorn
from passwatch.api import create_app

logging.basicConfig(level=logging.INFO)
app = create_app()

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    uvicorn.run("main:app", host=host, port=port, reload=False)
