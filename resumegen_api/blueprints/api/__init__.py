from __future__ import annotations

import os
import logging
from flask import Blueprint

logger = logging.getLogger(__name__)

API_VERSION = os.getenv("API_VERSION", "v1")

# Create the blueprint
api_bp = Blueprint("api", __name__, url_prefix=f"/{API_VERSION}")


# Import API routes to register them on blueprint after blueprint creation
from .documents import *
from .export import *
from .jobs import *
from .resumes import *
from .templates import *
