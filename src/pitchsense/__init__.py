"""pitchsense: trajectory prediction and tactical decision support for 2D team ball games."""

from .profiles import DEFAULT_PROFILE, PhysicsProfile, validate
from .simulation import predict_ball, simulate_agent, simulate_ball
from .version import get_package_version

__version__ = get_package_version()
__author__ = "pitchsense contributors"
__description__ = "Trajectory prediction and tactical decision support for 2D team ball games"

__all__ = [
    "DEFAULT_PROFILE",
    "PhysicsProfile",
    "predict_ball",
    "simulate_agent",
    "simulate_ball",
    "validate",
]
