"""Allow ``python -m evg_client``."""

from .cli import main

if __name__ == "__main__":
    main()
