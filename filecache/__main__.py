"""Main entry point when executing filecache as a package.

This allows running the package using python -m filecache.
"""

from filecache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
