"""Allow ``python -m dust_sweeper``."""
from .cli import main

if __name__ == "__main__":
    main()
