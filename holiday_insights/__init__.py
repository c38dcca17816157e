"""Holiday insights: derived public-holiday answers over a flaky upstream."""

__version__ = "1.0.0"
