"""lotterypay: lottery ticket sales with hosted-checkout payments."""

__version__ = "1.0.0"
