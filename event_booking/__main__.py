"""Entry point for `python -m event_booking`."""

from .workflows.bootstrap import run

if __name__ == "__main__":
    run()
