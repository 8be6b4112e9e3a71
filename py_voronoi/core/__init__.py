"""
Core Voronoi rendering functionality.
"""

from .geometry import Point, BoundingBox, BoundingBoxOverflowError
from .kdtree import KdTree, KdNode, Axis
from .alea_prng import AleaPRNG
from .sampling import generate_distinct_random_points
from .color import Rgb, Hsv, Luminosity, RandomColorConfig, random_color, lerp_color, parse_color
from .voronoi import new_image, rasterize, gradient_voronoi, random_voronoi

__all__ = ['Point', 'BoundingBox', 'BoundingBoxOverflowError',
           'KdTree', 'KdNode', 'Axis', 'AleaPRNG', 'generate_distinct_random_points',
           'Rgb', 'Hsv', 'Luminosity', 'RandomColorConfig', 'random_color', 'lerp_color',
           'parse_color', 'new_image', 'rasterize', 'gradient_voronoi', 'random_voronoi']
