"""Allow running as: python -m quote_pricing"""

from quote_pricing.main import cli

if __name__ == "__main__":
    cli()
