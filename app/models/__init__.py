# ZeroQ Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User, Role                                          # noqa
from app.models.space import Space                                              # noqa
from app.models.occupancy import OccupancyReading, CurrentOccupancy, CrowdLevel  # noqa
from app.models.review import Review                                            # noqa
from app.models.favorite import Favorite                                        # noqa
