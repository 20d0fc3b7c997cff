"""Restaurant and review CRUD API with geospatial lookup."""

__version__ = "0.1.0"
