# Gesture Canvas - Draw on a canvas with hand gestures
# Version: 1.0.0

"""
Core modules for the gesture-based drawing system:
- config: Tunable thresholds and application settings
- landmarks: Hand landmark types and geometry helpers
- gesture_logic: Gesture classification and stability filter
- dispatcher: Gesture to canvas action state machine
- canvas: Drawing elements, view transform and history
- stroke_processor: Handwriting simplification and smoothing
- camera: Webcam stream handler
- hand_tracking: MediaPipe hand landmark detection
- rendering: OpenCV rendering sink
- ui: Main application interface
"""

__version__ = "1.0.0"
