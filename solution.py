"""
Print DEM summits ranked by topographic prominence.

    python solution.py W100N40.bin --min-prominence 100 --top 20

See `python solution.py --help` for every option.
"""

import sys

from prominence.cli import main

if __name__ == "__main__":
    sys.exit(main())
