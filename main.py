import uvicorn

from jukebox.config import JUKEBOX_HOST, JUKEBOX_LOG_LEVEL, JUKEBOX_PORT
from jukebox.core import configure_logging, log_info, log_section


def main() -> None:
    configure_logging(JUKEBOX_LOG_LEVEL)
    log_section("Party Jukebox")
    log_info(f"Serving on http://{JUKEBOX_HOST}:{JUKEBOX_PORT}")
    uvicorn.run("api_main:app", host=JUKEBOX_HOST, port=JUKEBOX_PORT)


if __name__ == "__main__":
    main()
