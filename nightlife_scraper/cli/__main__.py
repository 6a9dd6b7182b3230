"""Entry point for running CLI as module.

Usage:
    python -m nightlife_scraper.cli run --dry-run
    python -m nightlife_scraper.cli sources
"""

from nightlife_scraper.cli.main import main

if __name__ == "__main__":
    main()
