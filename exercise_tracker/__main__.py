"""Allow `python -m exercise_tracker`."""

from exercise_tracker.main import run

if __name__ == "__main__":
    run()
