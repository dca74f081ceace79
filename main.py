import sys

from speech_detector.cli import main

if __name__ == "__main__":
    sys.exit(main())
