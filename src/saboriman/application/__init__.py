"""Application layer: scan orchestration and background workers."""
