"""
Aurorascope: ambient aurora band backgrounds.
Lattice gradient noise drives translucent, softly bounded ribbons.
"""

from aurorascope.bands import DEFAULT_BANDS, BandModel, create_bands
from aurorascope.base import AuroraConfig
from aurorascope.canvas import Canvas, DrawingContext, LinearGradient
from aurorascope.driver import AnimationDriver, FixedViewport, ManualScheduler
from aurorascope.geometry import GeometrySample, build_geometry
from aurorascope.noise import NoiseEngine
from aurorascope.pipeline import AuroraRenderer
from aurorascope.renderer import BandRenderer
