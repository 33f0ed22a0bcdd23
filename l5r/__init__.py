"""Precomputed XkY dice pool probabilities for Legend of the Five Rings."""
