"""Entry point for 'python -m motebase_admin' command."""

from motebase_admin.cli import main

if __name__ == "__main__":
    main()
