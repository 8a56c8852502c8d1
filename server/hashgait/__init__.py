"""HashGait behavioral-biometric authentication."""

__version__ = "1.0.0"
