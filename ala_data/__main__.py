from __future__ import annotations

import uvicorn

from ala_data.shared.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "ala_data.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
