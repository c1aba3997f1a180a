"""Run the receptionist with uvicorn."""
import uvicorn

from receptionist.core.config import settings


def main() -> None:
    uvicorn.run("receptionist.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
