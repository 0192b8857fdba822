"""Allow ``python -m duration_filter``."""

from .cli import main

if __name__ == "__main__":
    main()
