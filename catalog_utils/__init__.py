# Demo Catalog Utilities Package
# Catalog sync, enrichment and filtering shared by the gallery and admin apps
from . import models
from . import backend
from . import enricher
from . import projector
from . import synchronizer
from . import tag_allocator
from . import catalog_ops
from . import demo_form

__version__ = "0.1.0"
