import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn


def main() -> None:
    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "8787"))
    workers = int(os.environ.get("API_WORKERS", "1"))
    uvicorn.run("verse_platform.api.server:app", host=host, port=port, workers=workers, reload=False)


if __name__ == "__main__":
    main()
