"""Viewer control plane: landmarks, overlay, sampling and display."""
