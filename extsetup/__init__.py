"""Extension setup engine for long-lived host applications"""

__version__ = "5.0.0"
