"""
Test suite for HREF replay.

Focus areas:
- Event and document validation
- Reconstruction rules and offset arithmetic
- Scheduler delivery guarantees
- Seek/replay determinism
"""
