"""Allow running the CLI as `python -m lcu_bridge.cli`."""

from .main import main

if __name__ == "__main__":
    main()
