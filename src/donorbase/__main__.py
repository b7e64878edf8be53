"""Entry point for 'python -m donorbase'."""

from donorbase.cli import main

if __name__ == "__main__":
    main()
