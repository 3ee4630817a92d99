"""Entry point for the SiteDeploy CLI.

Running ``python -m sitedeploy`` performs a full deploy from the current directory.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
