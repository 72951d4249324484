"""QA instance retention bot: warn idle QA environment issues, then close them."""

__version__ = "1.0.4"
