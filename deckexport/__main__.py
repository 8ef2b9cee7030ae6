"""Entry point for python -m deckexport"""

from deckexport.cli import cli

if __name__ == "__main__":
    cli()
