"""
Eligibility Engine - Cash-flow Loan Eligibility Service

Scores small unsecured loan eligibility from observed cash-flow behaviour,
recommends a credit line, and records every decision for audit.
"""

__version__ = "1.0.0"
