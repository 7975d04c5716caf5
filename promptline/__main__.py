"""``python -m promptline`` prints the prompt for the current directory."""

from .cli import main


if __name__ == "__main__":
    main()
