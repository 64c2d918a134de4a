"""RAML loading and schema expansion."""
