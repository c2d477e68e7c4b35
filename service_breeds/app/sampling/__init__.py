"""
Sampling package: random single and batch selection from cached lists.
"""

from .sampler import Sampler

__all__ = ["Sampler"]
