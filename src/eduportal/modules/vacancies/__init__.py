"""
Vacancies module - Teaching vacancies advertised by institutions and centers.
"""

from eduportal.modules.vacancies.models import Vacancy

__all__ = ["Vacancy"]
