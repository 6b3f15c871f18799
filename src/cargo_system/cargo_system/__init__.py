"""Cahaya Cargo back office package.

This package is organized by feature modules (transactions, invoices, voyages,
payroll, ...) with a thin Flask controller layer and service/repository layers.
"""
