from . import geo_utils
