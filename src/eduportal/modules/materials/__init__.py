"""
Materials module - Study materials posted by institutions, teachers and centers.
"""

from eduportal.modules.materials.models import Material

__all__ = ["Material"]
