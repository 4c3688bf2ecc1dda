"""Run the anchorwall API under uvicorn. The match loop is started by the app lifespan."""
import logging

import uvicorn

from anchorwall.config import API_HOST, API_PORT


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("anchorwall.api.app:app", host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
