from . import generate_sample

__all__ = ["generate_sample"]
