"""
Speech Detector Tests
=====================

Unit tests for the speech detector components.

Test Structure:
- test_config.py: configuration model, env loading, validation
- test_classifier.py / test_transitions.py: level classification and mic edges
- test_segment.py: segment state machine and verdict rules
- test_preroll.py: pre-roll hint cadence
- test_dispatcher.py: sink commands and chunk suppression
- test_detector.py: end-to-end tick scenarios and session controls
- test_meter.py / test_recorder.py / test_mic.py / test_volume_worker.py: live collaborators
- conftest.py: shared fixtures

To run tests:
    pytest tests/
"""
