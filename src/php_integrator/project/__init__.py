"""Project settings, excluded path resolution and the active-project manager."""
