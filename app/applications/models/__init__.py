"""Approval workflow models."""

from app.applications.models.approval import ApprovalStatus
from app.applications.models.instructor_application import InstructorApplication
from app.applications.models.suspension_appeal import SuspensionAppeal

__all__ = ["ApprovalStatus", "InstructorApplication", "SuspensionAppeal"]
