"""
Questionnaire Response Rule Engine (QRRE) Package

Pure decision functions for supplier-compliance questionnaires.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Rendering of input controls
    - File upload storage
    - Record persistence
    - Email delivery or authentication

The engine consumes question definitions and an answer map, and only
returns decisions: reachable questions, validation issues, progress,
secondary widgets and Z-Code values.

No engine function performs I/O or keeps state between calls.
"""

__version__ = "0.1.0"
