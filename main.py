#!/usr/bin/env python
"""
Gesture Canvas - Main Entry Point
=================================
Run the gesture-based drawing application.
"""

from pathlib import Path

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent / ".env")

from gesture_canvas.ui import main

if __name__ == "__main__":
    main()
