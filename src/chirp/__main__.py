"""chirp entrypoint.

Run with:
  python -m chirp
"""

import os
import uvicorn

from chirp.log import configure_logging

def main() -> None:
    host = os.getenv("CHIRP_HOST", "0.0.0.0")
    port = int(os.getenv("CHIRP_PORT", "8000"))
    reload = os.getenv("CHIRP_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    configure_logging()
    uvicorn.run("chirp.app:create_app", factory=True, host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
