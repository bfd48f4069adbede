"""Volunteer Hub package.

This package is organized by feature modules (applications, attendance,
penalties, certificates, ...) with a thin Flask controller layer on top of
service/repository layers. The attendance, penalty and eligibility modules
together form the enforcement engine; the rest is data-access glue.
"""
