"""Technical SEO audit scanner."""

__version__ = "1.0.0"
