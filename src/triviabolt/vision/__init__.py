"""Capture surface, frame preprocessing and OCR engines."""
