"""
Institutions module - Institution registration and the institution's own
admissions, vacancies, materials and received enquiries.
"""
