"""Allow running the tool with ``python -m artifact_import``."""

from artifact_import.cli.__main__ import app

if __name__ == "__main__":
    app()
