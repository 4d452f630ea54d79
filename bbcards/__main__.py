"""Entry point for python -m bbcards

Usage:
  python -m bbcards render --directory decks/
  python -m bbcards render -w white.txt -b black.txt -o cards.pdf
"""

from bbcards.cli import cli

if __name__ == "__main__":
    cli()
