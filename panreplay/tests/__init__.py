"""
Test suite for the pan replay engine.

Focus areas:
- Normalizer de-duplication and parsing
- Keyframe compilation and window bounds
- Replay determinism and forward/backward consistency
- Machine assignment and queue shifting
- Playback control and animation cancellation
"""
