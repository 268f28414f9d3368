"""City map poster generator"""

__version__ = "0.1.0"
