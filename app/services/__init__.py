"""Service layer - eligibility, profile status, reports and upload reconciliation."""
