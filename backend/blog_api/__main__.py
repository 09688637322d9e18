"""
Run the Blog API with uvicorn.

    python -m blog_api        # or the `blog-api` console script

Host, port and log level come from Settings (HOST, PORT, LOG_LEVEL).
Uvicorn installs the SIGINT/SIGTERM handlers; the app lifespan closes the
database before the process exits.
"""

import uvicorn

from blog_api.config import settings


def main() -> None:
    uvicorn.run(
        "blog_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
