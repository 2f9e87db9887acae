"""
Enquiries module - Admission enquiries from students and vacancy enquiries from teachers.
"""

from eduportal.modules.enquiries.models import Enquiry, EnquiryStatus, EnquiryType

__all__ = ["Enquiry", "EnquiryStatus", "EnquiryType"]
