"""Command-line runner and settings for the FitMap crawler."""
