"""
Main execution point for the Coveralls Migrate to GitHub App tool.
"""

import sys

from coveralls_migrate.main import main


if __name__ == "__main__":
    sys.exit(main())
