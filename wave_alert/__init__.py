"""Marine wave-height alerting: forecast polling, exceedance reports, email delivery."""

__version__ = "1.0.0"
