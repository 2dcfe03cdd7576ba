"""Main entry point when executing docketcache as a package.

This allows running the package using python -m docketcache.
"""

from docketcache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
