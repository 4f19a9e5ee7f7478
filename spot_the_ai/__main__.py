from __future__ import annotations

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    # Pick up a local .env before settings are read.
    load_dotenv(override=False)

    from spot_the_ai.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "spot_the_ai.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_dev,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
