"""Entry point for `python -m thememgr`."""

import sys


def main():
    from thememgr.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
