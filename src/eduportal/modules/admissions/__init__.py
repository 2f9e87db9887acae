"""
Admissions module - Admission notices published by institutions.
"""

from eduportal.modules.admissions.models import Admission

__all__ = ["Admission"]
