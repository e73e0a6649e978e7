"""Entry point for the prompt optimizer.

Improve a prompt with:
    python -m prompt_optimizer "Create a login page" --mode deep
"""

import sys

from prompt_optimizer.app import main

if __name__ == "__main__":
    sys.exit(main())
