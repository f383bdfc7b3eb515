"""PetMatch: backend REST para encontrar y adoptar mascotas."""
__version__ = "1.0.0"
