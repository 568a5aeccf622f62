"""
Entry point for running Citation Watcher as a module.

Enables execution via:
    python -m citation_watcher [command] [options]

This is equivalent to running the installed CLI:
    citation-watcher [command] [options]

Examples:
    python -m citation_watcher --help
    python -m citation_watcher extract --input request.yaml
    python -m citation_watcher sentiment "Acme is not good."
"""

from citation_watcher.cli import app

if __name__ == "__main__":
    app()
