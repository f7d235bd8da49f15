"""Run the API server: python -m agentforms.api"""

import uvicorn

from agentforms.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "agentforms.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
    )


if __name__ == "__main__":
    main()
