"""Recovery Resource Locator: nearest recovery and harm-reduction centers."""

__version__ = "0.1.0"
