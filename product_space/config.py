import os

# Threshold above which a country is considered to export a product
DEFAULT_CUTOFF = float(os.environ.get("PRODUCT_SPACE_CUTOFF", 1.0))

# Textual marker for a missing observation in the raw files
NULL_SENTINEL = os.environ.get("PRODUCT_SPACE_NULL", "NULL")

LOG_LEVEL = os.environ.get("PRODUCT_SPACE_LOG_LEVEL", "INFO")

# Column names of the OEC-style export tables
COUNTRY_COLUMN = "origin"
PRODUCT_COLUMN = "hs92"
YEAR_COLUMN = "year"
VALUE_COLUMN = "export_val"

# Number of iterations for the method of reflections (Hidalgo & Hausmann, 2009)
REFLECTION_ITERATIONS = 18
