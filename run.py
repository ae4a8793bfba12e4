import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # Single worker: the counter store is a local file that is
    # read-modify-written without locking.
    uvicorn.run(
        "dreamcar.main:app",
        host="0.0.0.0",
        port=port,
        workers=1,
    )
