# Gatekeeper — Database Models
# Import all models here for SQLAlchemy discovery

from gatekeeper.models.visitor import Visitor  # noqa
