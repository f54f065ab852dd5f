"""Real-time interview transcript segmentation service."""
