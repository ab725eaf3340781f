"""
Entry point for python -m git_version_stamp

Allows running the package as a module:
    python -m git_version_stamp timestamp
"""

from .cli import main

if __name__ == '__main__':
    main()
