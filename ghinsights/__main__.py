"""Module entrypoint for `python -m ghinsights`.

Forwards to the same main() function as the console script.

Usage:
    ```bash
    python -m ghinsights --format md
    ```
"""

from .cli import main

if __name__ == "__main__":
    main()
