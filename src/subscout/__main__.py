"""Entry point for running subscout as a module.

Usage:
    python -m subscout extract messages.json
    python -m subscout --help
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env before any other imports that need env vars

from subscout.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
